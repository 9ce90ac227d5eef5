from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from firestore_dispatch.config import settings
from firestore_dispatch.handle import FirebaseHandle, init_firebase
from firestore_dispatch.instance import create_firestore_instance
from firestore_dispatch.logging_config import setup_logger
from firestore_dispatch.routers import health, listeners

logger = setup_logger(__name__)


def log_dispatch(action: Dict[str, Any]) -> None:
    """Dispatch function for the service: actions end up in the log"""
    action_type = getattr(action["type"], "value", action["type"])
    if action.get("error"):
        logger.warning(f"{action_type}: {action.get('payload')}")
    else:
        logger.info(action_type)


@asynccontextmanager
async def lifespan(app: FastAPI):
    handle = FirebaseHandle(app=init_firebase(settings))
    instance = create_firestore_instance(handle, settings.firestore_overrides(), log_dispatch)
    yield
    # Stop every listener still registered
    for name, entry in list(instance.internals["listeners"].items()):
        try:
            listeners.get_helpers(instance).unset_listener(entry["query"])
        except Exception as e:
            logger.error(f"Failed to unset listener {name} on shutdown: {str(e)}")
    logger.info("Firestore listeners closed")


app = FastAPI(title="Firestore Dispatch API", lifespan=lifespan)

logger.info("Starting Firestore Dispatch API application")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(health.router, tags=["health"])
app.include_router(listeners.router, prefix="/listeners", tags=["listeners"])
