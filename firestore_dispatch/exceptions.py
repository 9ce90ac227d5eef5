class FirestoreInstanceNotInitializedError(RuntimeError):
    """Raised when the instance is requested before create_firestore_instance ran"""

    def __init__(self, message: str = "Firestore instance does not yet exist. Check your setup."):
        super().__init__(message)
