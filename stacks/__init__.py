# stacks/__init__.py
from .errors import (
    StacksError, NotFound, Conflict, CapacityExceeded,
    InvalidArgument, IntegrityViolation, ConfigurationError, StorageUnavailable
)
from .ids import BookcaseId, ShelfId, BookId, AuthorId

__all__ = [
    'StacksError',
    'NotFound',
    'Conflict',
    'CapacityExceeded',
    'InvalidArgument',
    'IntegrityViolation',
    'ConfigurationError',
    'StorageUnavailable',
    'BookcaseId',
    'ShelfId',
    'BookId',
    'AuthorId'
]
