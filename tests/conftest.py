import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from firestore_dispatch.config import merge_config
from firestore_dispatch.handle import FirebaseHandle


@pytest.fixture(autouse=True)
def reset_firestore_instance():
    """Each test starts without a process-wide instance"""
    import firestore_dispatch.instance as instance_module
    instance_module._firestore_instance = None
    yield
    instance_module._firestore_instance = None


@pytest.fixture
def mock_firestore_client():
    """Mock Firestore client"""
    mock_client = MagicMock()
    mock_collection = MagicMock()
    mock_client.collection.return_value = mock_collection
    return mock_client


@pytest.fixture
def native_surface():
    """Stand-in for the static firestore module surface"""
    return SimpleNamespace(SERVER_TIMESTAMP="server-timestamp")


@pytest.fixture
def handle(mock_firestore_client, native_surface):
    """Handle wrapping the mock client"""
    return FirebaseHandle(client=mock_firestore_client, native_surface=native_surface)


@pytest.fixture
def configured_handle(handle):
    """Handle with internals set up the way create_firestore_instance leaves them"""
    handle.internals = {"listeners": {}, "config": merge_config()}
    return handle


@pytest.fixture
def dispatch():
    """Dispatch function recording every action"""
    return MagicMock()
