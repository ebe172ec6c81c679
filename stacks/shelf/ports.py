"""Outbound ports of the shelf module.

The shelf module states here, in its own terms, what it needs from the
catalog. The catalog module supplies the adapter; nothing in this package
imports catalog types.
"""

import abc
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from stacks.ids import BookId, ShelfId


@dataclass(frozen=True)
class BriefBibliographicRecord:
    """Just enough about a book to show it while browsing a shelf."""
    book_id: BookId
    title: str
    authors: List[str] = field(default_factory=list)
    isbn: Optional[str] = None
    publisher: Optional[str] = None
    publication_year: Optional[int] = None


class BookAccessPort(abc.ABC):
    """What the shelf module needs to know about, and do to, books."""

    @abc.abstractmethod
    def get_book_ids_by_shelf_id(self, shelf_id: ShelfId) -> List[BookId]:
        """Returns the IDs of all books currently assigned to a shelf."""
        pass

    @abc.abstractmethod
    def book_count_for_shelf(self, shelf_id: ShelfId) -> int:
        """Returns the live number of books on a shelf."""
        pass

    @abc.abstractmethod
    def book_count_for_shelves(self, shelf_ids: Sequence[ShelfId]) -> int:
        """Returns the number of books on any of the given shelves."""
        pass

    @abc.abstractmethod
    def book_exists(self, book_id: BookId) -> bool:
        pass

    @abc.abstractmethod
    def current_shelf_of(self, book_id: BookId) -> Optional[ShelfId]:
        """Returns the shelf a book is on, or None when it is unshelved."""
        pass

    @abc.abstractmethod
    def assign_book_to_shelf(self, book_id: BookId, shelf_id: ShelfId, capacity: int) -> bool:
        """Moves a book onto a shelf only if the shelf holds fewer than capacity books.

        The count and the write must be a single atomic step.

        Returns:
            True if the book was assigned, False if the shelf had no room.
        """
        pass

    @abc.abstractmethod
    def unassign_book(self, book_id: BookId) -> None:
        pass

    @abc.abstractmethod
    def delete_books_on_shelves(self, shelf_ids: Sequence[ShelfId]) -> None:
        """Deletes every book on the given shelves. Idempotent; an empty list is a no-op."""
        pass

    @abc.abstractmethod
    def unassign_books_on_shelves(self, shelf_ids: Sequence[ShelfId]) -> None:
        """Clears the shelf of every book on the given shelves. Idempotent; an empty list is a no-op."""
        pass

    @abc.abstractmethod
    def get_brief_records_by_shelf_id(self, shelf_id: ShelfId) -> List[BriefBibliographicRecord]:
        pass
