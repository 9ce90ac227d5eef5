"""
Firestore action definitions.

Every action takes the client handle and the dispatch function first; the
instance binds both so callers only pass the query arguments. One-shot
operations are coroutines that dispatch request/success/failure actions.
Listener actions are synchronous and track their subscriptions in
handle.internals["listeners"].
"""
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from google.cloud.firestore_v1.transaction import transactional

from firestore_dispatch.constants import ActionType
from firestore_dispatch.logging_config import setup_logger
from firestore_dispatch.utils.actions import log_action, wrap_in_dispatch
from firestore_dispatch.utils.query import (
    QueryInput,
    firestore_ref,
    get_query_config,
    get_query_name,
    snapshot_to_payload,
)

logger = setup_logger(__name__)


def _config(handle) -> Dict[str, Any]:
    return handle.internals.get("config", {})


def _listeners(handle) -> Dict[str, Any]:
    return handle.internals.setdefault("listeners", {})


def _dispatch(handle, dispatch: Callable, action: Dict[str, Any]) -> None:
    log_action(action, _config(handle).get("enable_logging", False))
    dispatch(action)


def _meta(query: QueryInput) -> Dict[str, Any]:
    return get_query_config(query).model_dump(exclude_none=True)


async def get(handle, dispatch: Callable, query: QueryInput):
    """Get a document or the documents matching a query"""
    ref = firestore_ref(handle, query)
    return await wrap_in_dispatch(
        dispatch,
        ref.get,
        types=(ActionType.GET_REQUEST, ActionType.GET_SUCCESS, ActionType.GET_FAILURE),
        meta=_meta(query),
        transform=snapshot_to_payload,
        enable_logging=_config(handle).get("enable_logging", False)
    )


async def set_document(handle, dispatch: Callable, query: QueryInput, data: Dict[str, Any], merge: bool = False):
    """Write a document, replacing it unless merge is set"""
    ref = firestore_ref(handle, query)
    return await wrap_in_dispatch(
        dispatch,
        ref.set,
        types=(ActionType.SET_REQUEST, ActionType.SET_SUCCESS, ActionType.SET_FAILURE),
        args=(data,),
        kwargs={"merge": merge},
        meta=_meta(query),
        transform=lambda _: data,
        enable_logging=_config(handle).get("enable_logging", False)
    )


async def add(handle, dispatch: Callable, query: QueryInput, data: Dict[str, Any]):
    """Add a document with a generated id to a collection"""
    ref = firestore_ref(handle, query)

    def _payload(result):
        _, doc_ref = result
        return {"id": doc_ref.id, "data": data}

    return await wrap_in_dispatch(
        dispatch,
        ref.add,
        types=(ActionType.ADD_REQUEST, ActionType.ADD_SUCCESS, ActionType.ADD_FAILURE),
        args=(data,),
        meta=_meta(query),
        transform=_payload,
        enable_logging=_config(handle).get("enable_logging", False)
    )


async def update(handle, dispatch: Callable, query: QueryInput, data: Dict[str, Any]):
    """Update fields of an existing document"""
    ref = firestore_ref(handle, query)
    return await wrap_in_dispatch(
        dispatch,
        ref.update,
        types=(ActionType.UPDATE_REQUEST, ActionType.UPDATE_SUCCESS, ActionType.UPDATE_FAILURE),
        args=(data,),
        meta=_meta(query),
        transform=lambda _: data,
        enable_logging=_config(handle).get("enable_logging", False)
    )


async def delete_ref(handle, dispatch: Callable, query: QueryInput):
    """Delete a document"""
    ref = firestore_ref(handle, query)
    return await wrap_in_dispatch(
        dispatch,
        ref.delete,
        types=(ActionType.DELETE_REQUEST, ActionType.DELETE_SUCCESS, ActionType.DELETE_FAILURE),
        meta=_meta(query),
        transform=lambda _: None,
        enable_logging=_config(handle).get("enable_logging", False)
    )


async def run_transaction(handle, dispatch: Callable, transaction_fn: Callable, *args, **kwargs):
    """
    Run transaction_fn(transaction, *args, **kwargs) inside a Firestore
    transaction, retrying on contention like firestore.transactional does.
    """
    transaction = handle.firestore().transaction()
    return await wrap_in_dispatch(
        dispatch,
        transactional(transaction_fn),
        types=(ActionType.TRANSACTION_START, ActionType.TRANSACTION_SUCCESS, ActionType.TRANSACTION_FAILURE),
        args=(transaction, *args),
        kwargs=kwargs,
        enable_logging=_config(handle).get("enable_logging", False)
    )


# ============== LISTENERS ==============

def attach_listener(handle, dispatch: Callable, name: str, meta: Dict[str, Any], watch: Any) -> None:
    """Register a watch under name and dispatch SET_LISTENER"""
    listeners = _listeners(handle)
    entry = listeners.setdefault(name, {"query": meta, "watches": []})
    entry["watches"].append(watch)
    _dispatch(handle, dispatch, {
        "type": ActionType.SET_LISTENER,
        "meta": meta,
        "payload": {"name": name}
    })


def _close_in_background(watches: List[Any]) -> threading.Thread:
    """
    Unsubscribe watches from a separate thread.

    Closing a watch joins its consumer thread, which is the thread snapshot
    callbacks run on.
    """
    def close():
        for watch in watches:
            try:
                watch.unsubscribe()
            except Exception as e:
                logger.error(f"Failed to close watch: {str(e)}")

    thread = threading.Thread(target=close, name="firestore-dispatch-unsubscribe", daemon=True)
    thread.start()
    return thread


def detach_listener(handle, dispatch: Callable, name: str, from_watch_thread: bool = False) -> bool:
    """
    Unsubscribe every watch registered under name. False when unknown.

    from_watch_thread must be set when called from a snapshot callback; the
    watches are then closed off-thread after the registry entry is removed.
    """
    entry = _listeners(handle).pop(name, None)
    if entry is None:
        logger.debug(f"No listener registered for {name}")
        return False

    if not from_watch_thread:
        for watch in entry["watches"]:
            watch.unsubscribe()

    if _config(handle).get("dispatch_on_unset_listener", True):
        _dispatch(handle, dispatch, {
            "type": ActionType.UNSET_LISTENER,
            "meta": entry["query"],
            "payload": {"name": name}
        })
    logger.info(f"Listener removed: {name}")
    if from_watch_thread:
        _close_in_background(entry["watches"])
    return True


def set_listener(
    handle,
    dispatch: Callable,
    query: QueryInput,
    success_callback: Optional[Callable] = None,
    error_callback: Optional[Callable] = None
):
    """
    Listen to a document or query.

    Each snapshot dispatches LISTENER_RESPONSE from the client's watch
    thread. If handling a snapshot fails the listener is detached,
    LISTENER_ERROR is dispatched and error_callback receives the error.

    Returns:
        The Firestore watch for this subscription.
    """
    meta = _meta(query)
    name = get_query_name(query)
    config = _config(handle)

    existing = _listeners(handle).get(name)
    if existing and not config.get("allow_multiple_listeners", False):
        logger.debug(f"Listener already set for {name}")
        return existing["watches"][0]

    def on_snapshot(snapshots, changes, read_time):
        try:
            _dispatch(handle, dispatch, {
                "type": ActionType.LISTENER_RESPONSE,
                "meta": meta,
                "payload": snapshot_to_payload(snapshots)
            })
            if success_callback:
                success_callback(snapshots)
        except Exception as e:
            _dispatch(handle, dispatch, {
                "type": ActionType.LISTENER_ERROR,
                "meta": meta,
                "payload": e,
                "error": True
            })
            try:
                if error_callback:
                    error_callback(e)
                elif config.get("log_listener_error", True):
                    logger.error(f"Listener error for {name}: {str(e)}")
            finally:
                # Runs on the watch's consumer thread
                detach_listener(handle, dispatch, name, from_watch_thread=True)

    try:
        watch = firestore_ref(handle, query).on_snapshot(on_snapshot)
    except Exception as e:
        logger.error(f"Failed to set listener for {name}: {str(e)}")
        _dispatch(handle, dispatch, {
            "type": ActionType.LISTENER_ERROR,
            "meta": meta,
            "payload": e,
            "error": True
        })
        raise

    attach_listener(handle, dispatch, name, meta, watch)
    return watch


def set_listeners(handle, dispatch: Callable, queries: Iterable[QueryInput]) -> List[Any]:
    return [set_listener(handle, dispatch, query) for query in queries]


def unset_listener(handle, dispatch: Callable, query: QueryInput) -> bool:
    """Stop listening to a document or query"""
    return detach_listener(handle, dispatch, get_query_name(query))


def unset_listeners(handle, dispatch: Callable, queries: Iterable[QueryInput]) -> List[bool]:
    return [unset_listener(handle, dispatch, query) for query in queries]


FIRESTORE_ACTIONS: Dict[str, Callable] = {
    "get": get,
    "set": set_document,
    "add": add,
    "update": update,
    "delete_ref": delete_ref,
    "run_transaction": run_transaction,
    "set_listener": set_listener,
    "set_listeners": set_listeners,
    "unset_listener": unset_listener,
    "unset_listeners": unset_listeners,
}
