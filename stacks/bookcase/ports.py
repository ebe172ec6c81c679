"""Outbound ports of the bookcase module.

The shelf module supplies the adapter; nothing in this package imports shelf
types.
"""

import abc
from dataclasses import dataclass
from typing import List

from stacks.ids import BookcaseId, ShelfId


@dataclass(frozen=True)
class ShelfSlot:
    """A shelf as the bookcase sees it: a numbered slot with a fill level."""
    shelf_id: ShelfId
    position: int
    label: str
    capacity: int
    book_count: int

    @property
    def has_space(self) -> bool:
        return self.book_count < self.capacity


class ShelfAccessPort(abc.ABC):
    """What the bookcase module needs from the shelf module."""

    @abc.abstractmethod
    def create_shelf(self, bookcase_id: BookcaseId, position: int, label: str, capacity: int) -> ShelfId:
        pass

    @abc.abstractmethod
    def delete_all_shelves_in_bookcase(self, bookcase_id: BookcaseId) -> int:
        """Removes every shelf of a bookcase, first disposing of the books on them.

        Idempotent; a bookcase without shelves is a no-op.

        Returns:
            Number of shelves removed
        """
        pass

    @abc.abstractmethod
    def shelf_slots(self, bookcase_id: BookcaseId) -> List[ShelfSlot]:
        """Returns the bookcase's shelves ordered by position."""
        pass
