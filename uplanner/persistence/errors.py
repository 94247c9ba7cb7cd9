"""Persistence-specific exceptions."""


class PersistenceError(Exception):
    """Base exception for all persistence errors."""


class DocumentNotFoundError(PersistenceError):
    """Raised when a Firestore document does not exist."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class ResetNotAllowedError(PersistenceError):
    """Raised when resetting a plan that is already unprocessed."""

    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(f"flight plan {plan_id} is already unprocessed")
