"""
Error taxonomy for the stacks engine.

Every failure a caller can observe is one of the kinds below. Integrity
errors are translated at the repository boundary; lock timeouts and lost
connections become StorageUnavailable when the session closes.
"""

from typing import Any


class StacksError(Exception):
    """Base exception for all stacks errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFound(StacksError):
    """Raised when a bookcase, shelf, book or author does not exist"""

    def __init__(self, entity: str, identifier: Any, message: str | None = None):
        self.entity = entity
        self.identifier = identifier
        msg = message or f"{entity} not found with id: {identifier}"
        super().__init__(msg, {"entity": entity, "id": str(identifier)})


class Conflict(StacksError):
    """Raised when a write collides with existing state"""

    DUPLICATE_BOOKCASE = "DuplicateBookcase"
    DUPLICATE_SHELF_POSITION = "DuplicateShelfPosition"
    DUPLICATE_ISBN = "DuplicateIsbn"

    def __init__(self, reason: str, message: str, **details: Any):
        self.reason = reason
        super().__init__(message, {"reason": reason, **details})


class CapacityExceeded(StacksError):
    """Raised when a placement targets a shelf that is already full"""

    def __init__(self, shelf_id: Any, capacity: int):
        self.shelf_id = shelf_id
        self.capacity = capacity
        super().__init__(
            f"Shelf with id {shelf_id} is full (capacity {capacity})",
            {"shelf_id": str(shelf_id), "capacity": capacity},
        )


class InvalidArgument(StacksError):
    """Raised when an argument fails validation"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, {"field": field} if field else {})


class IntegrityViolation(StacksError):
    """Raised when a book references a shelf that no longer exists"""

    def __init__(self, message: str, **details: Any):
        super().__init__(message, details)


class ConfigurationError(StacksError):
    """Raised when there's a configuration issue"""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message, {"key": key} if key else {})


class StorageUnavailable(StacksError):
    """Raised when the store is locked or unreachable"""

    def __init__(self, message: str):
        super().__init__(message, {})
