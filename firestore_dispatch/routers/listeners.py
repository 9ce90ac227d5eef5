from fastapi import APIRouter, Depends, HTTPException
from firestore_dispatch.exceptions import FirestoreInstanceNotInitializedError
from firestore_dispatch.instance import FirestoreInstance, get_firestore
from firestore_dispatch.schemas import ListenerListResponse, ListenerMessageResponse
from firestore_dispatch.logging_config import setup_logger

logger = setup_logger(__name__)
router = APIRouter()

def get_firestore_instance() -> FirestoreInstance:
    try:
        return get_firestore()
    except FirestoreInstanceNotInitializedError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=503, detail=str(e))

def get_helpers(instance: FirestoreInstance):
    """Object holding the action methods, honoring helpers_namespace"""
    namespace = instance.internals["config"].get("helpers_namespace")
    return getattr(instance, namespace) if namespace else instance

@router.get("", response_model=ListenerListResponse)
async def list_listeners(instance: FirestoreInstance = Depends(get_firestore_instance)):
    """List active listener names"""
    names = sorted(instance.internals["listeners"].keys())
    return ListenerListResponse(listeners=names, count=len(names))

@router.delete("/{name:path}", response_model=ListenerMessageResponse)
async def delete_listener(name: str, instance: FirestoreInstance = Depends(get_firestore_instance)):
    """Unset a listener by its registry name"""
    entry = instance.internals["listeners"].get(name)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Listener {name} not found")
    try:
        get_helpers(instance).unset_listener(entry["query"])
        logger.info(f"Listener {name} unset via API")
        return ListenerMessageResponse(message=f"Listener {name} unset")
    except Exception as e:
        logger.error(f"Failed to unset listener {name}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
