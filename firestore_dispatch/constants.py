"""
Action types and the native Firestore methods exposed on the instance
"""
from enum import Enum

ACTION_PREFIX = "@@reduxFirestore"


class ActionType(str, Enum):
    START = f"{ACTION_PREFIX}/START"
    ERROR = f"{ACTION_PREFIX}/ERROR"
    CLEAR_DATA = f"{ACTION_PREFIX}/CLEAR_DATA"

    GET_REQUEST = f"{ACTION_PREFIX}/GET_REQUEST"
    GET_SUCCESS = f"{ACTION_PREFIX}/GET_SUCCESS"
    GET_FAILURE = f"{ACTION_PREFIX}/GET_FAILURE"

    SET_REQUEST = f"{ACTION_PREFIX}/SET_REQUEST"
    SET_SUCCESS = f"{ACTION_PREFIX}/SET_SUCCESS"
    SET_FAILURE = f"{ACTION_PREFIX}/SET_FAILURE"

    ADD_REQUEST = f"{ACTION_PREFIX}/ADD_REQUEST"
    ADD_SUCCESS = f"{ACTION_PREFIX}/ADD_SUCCESS"
    ADD_FAILURE = f"{ACTION_PREFIX}/ADD_FAILURE"

    UPDATE_REQUEST = f"{ACTION_PREFIX}/UPDATE_REQUEST"
    UPDATE_SUCCESS = f"{ACTION_PREFIX}/UPDATE_SUCCESS"
    UPDATE_FAILURE = f"{ACTION_PREFIX}/UPDATE_FAILURE"

    DELETE_REQUEST = f"{ACTION_PREFIX}/DELETE_REQUEST"
    DELETE_SUCCESS = f"{ACTION_PREFIX}/DELETE_SUCCESS"
    DELETE_FAILURE = f"{ACTION_PREFIX}/DELETE_FAILURE"

    SET_LISTENER = f"{ACTION_PREFIX}/SET_LISTENER"
    UNSET_LISTENER = f"{ACTION_PREFIX}/UNSET_LISTENER"
    LISTENER_RESPONSE = f"{ACTION_PREFIX}/LISTENER_RESPONSE"
    LISTENER_ERROR = f"{ACTION_PREFIX}/LISTENER_ERROR"

    TRANSACTION_START = f"{ACTION_PREFIX}/TRANSACTION_START"
    TRANSACTION_SUCCESS = f"{ACTION_PREFIX}/TRANSACTION_SUCCESS"
    TRANSACTION_FAILURE = f"{ACTION_PREFIX}/TRANSACTION_FAILURE"


# Only these client methods are copied onto the instance. Everything that
# writes or listens goes through the dispatching actions instead.
METHODS_TO_ADD_FROM_FIRESTORE = [
    "collection",
    "collection_group",
    "document",
    "batch",
    "transaction",
    "collections",
    "get_all",
    "bulk_writer",
    "recursive_delete",
    "close",
]

# Key of the internal state attribute on the handle and the instance
INTERNALS_KEY = "internals"
