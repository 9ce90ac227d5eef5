from fastapi import APIRouter
from firestore_dispatch.config import settings
from firestore_dispatch.exceptions import FirestoreInstanceNotInitializedError
from firestore_dispatch.instance import get_firestore

router = APIRouter()

@router.get("/")
def health():
    """Health check endpoint"""
    try:
        get_firestore()
        instance_ready = True
    except FirestoreInstanceNotInitializedError:
        instance_ready = False
    return {
        "status": "ok",
        "firebase_project": settings.firebase_project_id,
        "instance_ready": instance_ready
    }
