# stacks/db/__init__.py
from .base import Base, TimestampMixin
from .database import Database

__all__ = [
    'Base',
    'TimestampMixin',
    'Database',
]
