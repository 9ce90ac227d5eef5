from typing import Any, Callable, Dict, Optional

from firestore_dispatch.instance import create_firestore_instance
from firestore_dispatch.logging_config import setup_logger

logger = setup_logger(__name__)


def firestore_enhancer(handle: Any, config: Optional[Dict[str, Any]] = None) -> Callable:
    """
    Store enhancer that attaches a Firestore instance to the created store.

    The store returned by create_store must expose a dispatch callable; the
    instance is created against it and set as store.firestore.

    Example:
        create_store = firestore_enhancer(handle, {"helpers_namespace": "db"})(Store)
        store = create_store(reducer)
        await store.firestore.db.get("todos")
    """
    def enhancer(create_store: Callable) -> Callable:
        def create_enhanced_store(*args, **kwargs):
            store = create_store(*args, **kwargs)
            store.firestore = create_firestore_instance(handle, config, store.dispatch)
            logger.debug(f"Firestore instance attached to {type(store).__name__}")
            return store
        return create_enhanced_store
    return enhancer
