"""
Helpers for binding action definitions and wrapping calls in dispatches
"""
import inspect
from functools import partial
from typing import Any, Callable, Dict, Iterable, NamedTuple, Optional, Sequence

from firestore_dispatch.logging_config import setup_logger

logger = setup_logger(__name__)


class Alias(NamedTuple):
    action: Callable
    name: str


def map_with_firebase_and_dispatch(
    handle: Any,
    dispatch: Callable,
    actions: Dict[str, Callable],
    aliases: Iterable[Alias] = ()
) -> Dict[str, Callable]:
    """
    Bind every action to the handle and dispatch function.

    Nothing is invoked here. An alias registers the same bound callable as
    its action under a second name.
    """
    methods = {
        name: partial(action, handle, dispatch)
        for name, action in actions.items()
    }
    for alias in aliases:
        canonical = next(
            (name for name, action in actions.items() if action is alias.action),
            None
        )
        if canonical is None:
            methods[alias.name] = partial(alias.action, handle, dispatch)
        else:
            methods[alias.name] = methods[canonical]
    return methods


def _type_name(action_type: Any) -> str:
    return getattr(action_type, "value", action_type)


def log_action(action: Dict[str, Any], enable_logging: bool = False) -> None:
    """Log a dispatched action, at INFO when enable_logging is set"""
    level = "info" if enable_logging else "debug"
    getattr(logger, level)(f"Dispatching {_type_name(action.get('type'))}")


async def wrap_in_dispatch(
    dispatch: Callable,
    method: Callable,
    types: Sequence[Any],
    args: Sequence[Any] = (),
    kwargs: Optional[Dict[str, Any]] = None,
    meta: Any = None,
    transform: Optional[Callable[[Any], Any]] = None,
    enable_logging: bool = False
) -> Any:
    """
    Call a Firestore method between request and success/failure dispatches.

    Args:
        dispatch: Dispatch function receiving action dicts
        method: Client method to call (sync or async)
        types: (request, success, failure) action types
        args: Positional arguments for method
        kwargs: Keyword arguments for method
        meta: Query meta attached to every dispatched action
        transform: Maps the method result to the success payload
        enable_logging: Log dispatched actions at INFO

    Returns:
        The method result. Failures are dispatched then re-raised.
    """
    request_type, success_type, failure_type = types

    def _dispatch(action):
        log_action(action, enable_logging)
        dispatch(action)

    _dispatch({"type": request_type, "meta": meta})
    try:
        result = method(*args, **(kwargs or {}))
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        logger.error(f"{_type_name(failure_type)}: {str(e)}")
        _dispatch({"type": failure_type, "meta": meta, "payload": e, "error": True})
        raise

    payload = transform(result) if transform else result
    _dispatch({"type": success_type, "meta": meta, "payload": payload})
    return result
