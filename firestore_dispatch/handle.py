"""
Firebase app initialization and the client handle extended by the instance
"""
import os
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore

from firestore_dispatch.config import Settings, settings as default_settings
from firestore_dispatch.logging_config import setup_logger

logger = setup_logger(__name__)


def init_firebase(settings: Optional[Settings] = None) -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once and return the default app"""
    settings = settings or default_settings
    credential = None
    if os.path.exists(settings.firebase_service_account_key):
        credential = credentials.Certificate(settings.firebase_service_account_key)
    try:
        app = firebase_admin.initialize_app(credential, options={
            'projectId': settings.firebase_project_id
        })
        logger.info(f"Firebase Admin SDK initialized for project: {settings.firebase_project_id}")
    except ValueError:
        # Already initialized
        app = firebase_admin.get_app()
        logger.debug("Firebase Admin SDK already initialized")
    return app


class FirebaseHandle:
    """
    Client handle passed to create_firestore_instance.

    Holds the firebase app, a lazily created Firestore client and the
    internal state slot shared with sibling integrations.
    """

    def __init__(
        self,
        app: Optional[firebase_admin.App] = None,
        client: Any = None,
        native_surface: Any = None
    ):
        self.app = app
        self._client = client
        # Static Firestore helpers (SERVER_TIMESTAMP, Increment, ...) kept
        # reachable on the instance
        self.native_surface = native_surface if native_surface is not None else firestore
        self.internals = {}

    def firestore(self):
        """Get or create the Firestore client for this app"""
        if self._client is None:
            self._client = firestore.client(self.app)
            logger.info("Firestore client initialized")
        return self._client

    def extend_app(self, **attrs) -> "FirebaseHandle":
        for name, value in attrs.items():
            setattr(self, name, value)
        return self
