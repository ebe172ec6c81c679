import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Set

from sqlalchemy.orm import Session

from stacks.errors import IntegrityViolation, InvalidArgument, NotFound
from stacks.ids import BookcaseId, ShelfId
from .models import Shelf
from .occupancy import ShelfOccupancy
from .ports import BookAccessPort, BriefBibliographicRecord
from .repositories import ShelfRepository
from .views import ShelfOption, ShelfSummary

logger = logging.getLogger(__name__)


class BookDisposal(str, Enum):
    """What to ask of the catalog for the books on shelves being removed"""
    UNASSIGN = "unassign"
    DELETE = "delete"


class ShelfService:
    """Shelf creation, occupancy queries and shelf removal.

    Book counts are always read live through the BookAccessPort; no count is
    cached on the shelf.
    """

    def __init__(self, session: Session, book_access: BookAccessPort,
                 disposal: BookDisposal = BookDisposal.UNASSIGN):
        self.session = session
        self.shelves = ShelfRepository(session)
        self.book_access = book_access
        self.disposal = disposal

    def create_shelf(self, bookcase_id: Optional[BookcaseId], position: int, label: str, capacity: int) -> ShelfId:
        """Create a shelf in a bookcase.

        Raises:
            InvalidArgument: If capacity or position is not positive, the label is
                blank or the bookcase ID is missing
            Conflict: If the bookcase already has a shelf at this position
        """
        if capacity is None or capacity <= 0:
            raise InvalidArgument("Book capacity must be at least 1", field="capacity")
        if label is None or not label.strip():
            raise InvalidArgument("Shelf label cannot be null or blank", field="label")
        if bookcase_id is None:
            raise InvalidArgument("Bookcase ID cannot be null", field="bookcase_id")
        if position is None or position <= 0:
            raise InvalidArgument("Shelf position must be greater than 0", field="position")

        shelf = self.shelves.create(Shelf(
            bookcase_id=int(bookcase_id),
            position=position,
            label=label.strip(),
            book_capacity=capacity,
        ))
        logger.debug("Created shelf %s at position %d in bookcase %s", shelf.id, position, bookcase_id)
        return shelf.shelf_id

    def find_shelf(self, shelf_id: ShelfId) -> Shelf:
        shelf = self.shelves.get_by_id(int(shelf_id))
        if shelf is None:
            raise NotFound("Shelf", shelf_id)
        return shelf

    def find_shelves_by_bookcase_id(self, bookcase_id: BookcaseId) -> List[Shelf]:
        return self.shelves.get_by_bookcase_id(int(bookcase_id))

    def book_count(self, shelf_id: ShelfId) -> int:
        return self.book_access.book_count_for_shelf(shelf_id)

    def is_full(self, shelf_id: ShelfId) -> bool:
        shelf = self.find_shelf(shelf_id)
        return self.book_count(shelf_id) >= shelf.book_capacity

    def is_empty(self, shelf_id: ShelfId) -> bool:
        self.find_shelf(shelf_id)
        return self.book_count(shelf_id) == 0

    def occupancy(self, shelf_id: ShelfId) -> ShelfOccupancy:
        shelf = self.find_shelf(shelf_id)
        return ShelfOccupancy.of(self.book_count(shelf_id), shelf.book_capacity)

    def shelf_summaries(self, bookcase_id: BookcaseId) -> List[ShelfSummary]:
        return [
            ShelfSummary(
                shelf_id=shelf.shelf_id,
                position=shelf.position,
                label=shelf.label,
                capacity=shelf.book_capacity,
                book_count=self.book_count(shelf.shelf_id),
            )
            for shelf in self.find_shelves_by_bookcase_id(bookcase_id)
        ]

    def shelf_options(self, bookcase_id: Optional[BookcaseId] = None) -> List[ShelfOption]:
        """List shelves as placement targets, for one bookcase or all of them"""
        shelves = (
            self.shelves.get_all() if bookcase_id is None
            else self.find_shelves_by_bookcase_id(bookcase_id)
        )
        return [
            ShelfOption(
                shelf_id=shelf.shelf_id,
                bookcase_id=shelf.parent_id,
                position=shelf.position,
                label=shelf.label,
                capacity=shelf.book_capacity,
                current_count=self.book_count(shelf.shelf_id),
            )
            for shelf in shelves
        ]

    def browse_shelf(self, shelf_id: ShelfId) -> List[BriefBibliographicRecord]:
        self.find_shelf(shelf_id)
        return self.book_access.get_brief_records_by_shelf_id(shelf_id)

    def existing_shelf_ids(self, shelf_ids: Iterable[ShelfId]) -> Set[ShelfId]:
        return {ShelfId(s) for s in self.shelves.get_existing_ids(int(s) for s in shelf_ids)}

    def delete_all_shelves_in_bookcase(self, bookcase_id: BookcaseId) -> int:
        """Remove a bookcase's shelves after disposing of the books on them.

        The shelf rows are locked before the books are handled, so a placement
        still in flight on one of them finishes first and its book is disposed
        of too. Safe to repeat: a second call finds nothing to do.

        Returns:
            Number of shelves deleted

        Raises:
            IntegrityViolation: If books still reference the shelves after disposal
        """
        shelves = self.shelves.get_by_bookcase_id(int(bookcase_id), for_update=True)
        shelf_ids = [shelf.shelf_id for shelf in shelves]
        self._dispose_of_books(shelf_ids)
        deleted = self.shelves.delete_by_bookcase_id(int(bookcase_id))
        logger.info("Bookcase with ID: %s has been cleared of %d shelves", bookcase_id, deleted)
        return deleted

    def delete_orphaned_shelves(self, live_bookcase_ids: Iterable[BookcaseId]) -> List[ShelfId]:
        """Remove shelves whose bookcase no longer exists, disposing of their books first"""
        orphans = self.shelves.get_outside_bookcases((int(b) for b in live_bookcase_ids), for_update=True)
        shelf_ids = [shelf.shelf_id for shelf in orphans]
        if not shelf_ids:
            return []
        self._dispose_of_books(shelf_ids)
        self.shelves.delete_by_ids([int(s) for s in shelf_ids])
        logger.warning("Removed %d orphaned shelves: %s", len(shelf_ids), [int(s) for s in shelf_ids])
        return shelf_ids

    def _dispose_of_books(self, shelf_ids: Sequence[ShelfId]) -> None:
        if self.disposal is BookDisposal.DELETE:
            self.book_access.delete_books_on_shelves(shelf_ids)
        else:
            self.book_access.unassign_books_on_shelves(shelf_ids)

        remaining = self.book_access.book_count_for_shelves(shelf_ids)
        if remaining:
            raise IntegrityViolation(
                f"{remaining} books still reference shelves scheduled for deletion",
                shelf_ids=[int(s) for s in shelf_ids],
                remaining=remaining,
            )
