from unittest.mock import MagicMock

from firestore_dispatch.enhancer import firestore_enhancer
from firestore_dispatch.instance import get_firestore


class FakeStore:
    def __init__(self, reducer, initial_state=None):
        self.reducer = reducer
        self.state = initial_state
        self.dispatched = []

    def dispatch(self, action):
        self.dispatched.append(action)


def test_enhancer_attaches_instance(handle):
    """Created store gets an instance bound to its dispatch"""
    reducer = MagicMock()
    create_store = firestore_enhancer(handle, {"helpers_namespace": "db"})(FakeStore)

    store = create_store(reducer, initial_state={})

    assert store.reducer is reducer
    assert store.state == {}
    assert store.firestore is get_firestore()
    assert callable(store.firestore.db.on_snapshot)


def test_enhanced_store_receives_actions(handle):
    store = firestore_enhancer(handle)(FakeStore)(MagicMock())

    store.firestore.set_listener("todos")

    assert [a["payload"] for a in store.dispatched] == [{"name": "todos"}]
