"""
Firestore instance with helpers attached for dispatching actions
"""
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from firestore_dispatch.actions.firestore import FIRESTORE_ACTIONS, delete_ref, set_listener
from firestore_dispatch.config import merge_config
from firestore_dispatch.constants import INTERNALS_KEY, METHODS_TO_ADD_FROM_FIRESTORE
from firestore_dispatch.exceptions import FirestoreInstanceNotInitializedError
from firestore_dispatch.logging_config import setup_logger
from firestore_dispatch.utils.actions import Alias, map_with_firebase_and_dispatch
from firestore_dispatch.utils.merge import deep_merge

logger = setup_logger(__name__)

ALIASES = [
    Alias(action=delete_ref, name="delete"),
    Alias(action=set_listener, name="on_snapshot"),
]

_firestore_instance = None


class NativeMethods(NamedTuple):
    bound: Dict[str, Callable]
    skipped: List[str]


def resolve_native_methods(handle: Any, method_names: Iterable[str] = METHODS_TO_ADD_FROM_FIRESTORE) -> NativeMethods:
    """
    Copy the allow-listed methods that exist and are callable on the
    handle's Firestore client. Missing ones are skipped, not raised.
    """
    method_names = list(method_names)
    accessor = getattr(handle, "firestore", None)
    if not callable(accessor):
        logger.debug("Handle has no firestore accessor, no native methods attached")
        return NativeMethods(bound={}, skipped=method_names)

    client = accessor()
    bound = {}
    skipped = []
    for name in method_names:
        # Bound methods keep the client as their receiver
        method = getattr(client, name, None)
        if callable(method):
            bound[name] = method
        else:
            skipped.append(name)

    if skipped:
        logger.debug(f"Native Firestore methods not available: {', '.join(skipped)}")
    return NativeMethods(bound=bound, skipped=skipped)


class FirestoreInstance:
    """
    Firestore client extended with dispatching helpers.

    Attribute lookup order, first match wins:
        1. action methods (only when no helpers namespace is configured)
        2. internals (config and listener registry)
        3. the handle's native Firestore surface
        4. curated native client methods
    With a namespace, action methods live under instance.<namespace>.
    """

    def __init__(
        self,
        internals: Dict[str, Any],
        methods: Dict[str, Callable],
        native_methods: Optional[NativeMethods] = None,
        native_surface: Any = None,
        namespace: Optional[str] = None
    ):
        native_methods = native_methods or NativeMethods(bound={}, skipped=[])
        self._curated = dict(native_methods.bound)
        self._skipped = tuple(native_methods.skipped)
        self._native_surface = native_surface
        self._namespace = namespace
        self._methods = {} if namespace else dict(methods)
        setattr(self, INTERNALS_KEY, internals)
        if namespace:
            setattr(self, namespace, SimpleNamespace(**methods))

    @property
    def skipped_native_methods(self):
        """Allow-listed client methods that were missing or not callable"""
        return self._skipped

    def __getattr__(self, name: str):
        # Only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._methods:
            return self._methods[name]
        if self._native_surface is not None and hasattr(self._native_surface, name):
            return getattr(self._native_surface, name)
        if name in self._curated:
            return self._curated[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __contains__(self, name: str) -> bool:
        return hasattr(self, name)

    def __dir__(self):
        names = set(super().__dir__()) | set(self._curated) | set(self._methods)
        if self._native_surface is not None:
            names |= {n for n in dir(self._native_surface) if not n.startswith("_")}
        return sorted(names)


def create_firestore_instance(handle: Any, config: Optional[Dict[str, Any]], dispatch: Callable) -> FirestoreInstance:
    """
    Create a Firestore instance that has helpers attached for dispatching
    actions, and make it the current process-wide instance.

    Args:
        handle: Client handle exposing firestore(), internals and extend_app()
        config: Config overrides merged over DEFAULT_CONFIG
        dispatch: Called with every action dict the helpers produce

    Returns:
        The assembled FirestoreInstance
    """
    global _firestore_instance
    config = config or {}

    default_internals = {
        # Filled by set_listener, emptied by unset_listener
        "listeners": {},
        "config": merge_config(config),
    }
    # Keep internals a sibling integration attached to the handle earlier
    existing = getattr(handle, INTERNALS_KEY, None) or {}
    handle.extend_app(**{INTERNALS_KEY: deep_merge(existing, default_internals)})
    internals = getattr(handle, INTERNALS_KEY)

    methods = map_with_firebase_and_dispatch(handle, dispatch, FIRESTORE_ACTIONS, ALIASES)
    native_methods = resolve_native_methods(handle)

    namespace = config.get("helpers_namespace")
    _firestore_instance = FirestoreInstance(
        internals=internals,
        methods=methods,
        native_methods=native_methods,
        native_surface=getattr(handle, "native_surface", None),
        namespace=namespace
    )
    logger.info(
        f"Firestore instance created with {len(methods)} helpers"
        + (f" under namespace '{namespace}'" if namespace else "")
    )
    return _firestore_instance


def get_firestore() -> FirestoreInstance:
    """
    Expose the Firestore instance created by create_firestore_instance.

    Useful for integrations that cannot receive the instance directly, such
    as FastAPI dependencies or background workers.
    """
    if _firestore_instance is None:
        raise FirestoreInstanceNotInitializedError()
    return _firestore_instance
