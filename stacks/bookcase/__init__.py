# stacks/bookcase/__init__.py
from .models import Bookcase
from .ports import ShelfAccessPort, ShelfSlot
from .repositories import BookcaseRepository
from .lifecycle import BookcaseLifecycle
from .queries import BookcaseQueries

__all__ = [
    'Bookcase',
    'ShelfAccessPort',
    'ShelfSlot',
    'BookcaseRepository',
    'BookcaseLifecycle',
    'BookcaseQueries'
]
