"""
Tests for action binding and dispatch wrapping
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from firestore_dispatch.utils.actions import Alias, map_with_firebase_and_dispatch, wrap_in_dispatch

TYPES = ("REQUEST", "SUCCESS", "FAILURE")


def dispatched_types(dispatch):
    return [c.args[0]["type"] for c in dispatch.call_args_list]


class TestMapWithFirebaseAndDispatch:
    def test_binding_does_not_invoke(self, dispatch):
        """Actions are only bound, never called at bind time"""
        action = MagicMock()
        handle = object()

        methods = map_with_firebase_and_dispatch(handle, dispatch, {"get": action})

        assert set(methods) == {"get"}
        action.assert_not_called()
        dispatch.assert_not_called()

    def test_bound_method_receives_handle_and_dispatch(self, dispatch):
        action = MagicMock(return_value="result")
        handle = object()

        methods = map_with_firebase_and_dispatch(handle, dispatch, {"get": action})
        result = methods["get"]("todos", limit=1)

        action.assert_called_once_with(handle, dispatch, "todos", limit=1)
        assert result == "result"

    def test_alias_shares_bound_callable(self, dispatch):
        """Alias and canonical name resolve to the same bound callable"""
        set_listener = MagicMock()
        methods = map_with_firebase_and_dispatch(
            object(), dispatch,
            {"set_listener": set_listener},
            [Alias(action=set_listener, name="on_snapshot")]
        )

        assert methods["on_snapshot"] is methods["set_listener"]

    def test_alias_for_unlisted_action(self, dispatch):
        """Aliases of actions outside the mapping are still bound"""
        extra = MagicMock()
        handle = object()
        methods = map_with_firebase_and_dispatch(handle, dispatch, {}, [Alias(action=extra, name="extra")])

        methods["extra"](1)
        extra.assert_called_once_with(handle, dispatch, 1)


class TestWrapInDispatch:
    async def test_success_sequence(self, dispatch):
        """Request then success, with transformed payload"""
        method = MagicMock(return_value=3)

        result = await wrap_in_dispatch(
            dispatch, method, TYPES, args=(1, 2), meta={"collection": "todos"},
            transform=lambda r: {"value": r}
        )

        assert result == 3
        method.assert_called_once_with(1, 2)
        assert dispatched_types(dispatch) == ["REQUEST", "SUCCESS"]
        success = dispatch.call_args_list[1].args[0]
        assert success["payload"] == {"value": 3}
        assert success["meta"] == {"collection": "todos"}

    async def test_awaits_coroutine_methods(self, dispatch):
        method = AsyncMock(return_value="done")

        result = await wrap_in_dispatch(dispatch, method, TYPES)

        assert result == "done"
        assert dispatched_types(dispatch) == ["REQUEST", "SUCCESS"]

    async def test_failure_dispatched_and_reraised(self, dispatch):
        """Errors dispatch the failure type and propagate unchanged"""
        error = PermissionError("denied")
        method = MagicMock(side_effect=error)

        with pytest.raises(PermissionError) as exc:
            await wrap_in_dispatch(dispatch, method, TYPES)

        assert exc.value is error
        assert dispatched_types(dispatch) == ["REQUEST", "FAILURE"]
        failure = dispatch.call_args_list[1].args[0]
        assert failure["payload"] is error
        assert failure["error"] is True
