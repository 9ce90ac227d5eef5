import pytest
from unittest.mock import MagicMock, patch
from firebase_admin import firestore

from firestore_dispatch.config import Settings
from firestore_dispatch.handle import FirebaseHandle, init_firebase


class TestInitFirebase:
    @patch("firestore_dispatch.handle.firebase_admin.initialize_app")
    def test_init_firebase_first_time(self, mock_init):
        """First-time initialization uses the configured project"""
        settings = Settings(_env_file=None, firebase_project_id="test-project", firebase_service_account_key="missing.json")

        app = init_firebase(settings)

        assert app is mock_init.return_value
        mock_init.assert_called_once_with(None, options={"projectId": "test-project"})

    @patch("firestore_dispatch.handle.firebase_admin.get_app")
    @patch("firestore_dispatch.handle.firebase_admin.initialize_app")
    def test_init_firebase_already_initialized(self, mock_init, mock_get_app):
        """ValueError from Firebase (already initialized) reuses the app"""
        mock_init.side_effect = ValueError("Already initialized")

        app = init_firebase(Settings(_env_file=None, firebase_service_account_key="missing.json"))

        assert app is mock_get_app.return_value

    @patch("firestore_dispatch.handle.credentials.Certificate")
    @patch("firestore_dispatch.handle.firebase_admin.initialize_app")
    def test_service_account_key_used(self, mock_init, mock_certificate, tmp_path):
        key_path = tmp_path / "key.json"
        key_path.write_text("{}")

        init_firebase(Settings(_env_file=None, firebase_service_account_key=str(key_path)))

        mock_certificate.assert_called_once_with(str(key_path))
        assert mock_init.call_args.args[0] is mock_certificate.return_value


class TestFirebaseHandle:
    @patch("firestore_dispatch.handle.firestore.client")
    def test_client_created_lazily_once(self, mock_client):
        app = MagicMock()
        handle = FirebaseHandle(app=app)

        mock_client.assert_not_called()
        first = handle.firestore()
        second = handle.firestore()

        mock_client.assert_called_once_with(app)
        assert first is second

    def test_given_client_used(self):
        client = MagicMock()
        assert FirebaseHandle(client=client).firestore() is client

    def test_default_native_surface(self):
        assert FirebaseHandle().native_surface is firestore

    def test_extend_app(self):
        handle = FirebaseHandle()
        assert handle.internals == {}

        result = handle.extend_app(internals={"listeners": {}}, extra=1)

        assert result is handle
        assert handle.internals == {"listeners": {}}
        assert handle.extra == 1
