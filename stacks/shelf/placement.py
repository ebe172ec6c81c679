import logging

from sqlalchemy.orm import Session

from stacks.errors import CapacityExceeded, IntegrityViolation, NotFound
from stacks.ids import BookId, ShelfId
from .occupancy import ShelfOccupancy
from .ports import BookAccessPort
from .repositories import ShelfRepository

logger = logging.getLogger(__name__)


class PlacementService:
    """The only writer of a book's shelf assignment."""

    def __init__(self, session: Session, book_access: BookAccessPort):
        self.session = session
        self.shelves = ShelfRepository(session)
        self.book_access = book_access

    def place_book_on_shelf(self, book_id: BookId, shelf_id: ShelfId) -> None:
        """Put a book on a shelf.

        The shelf row stays locked from the fullness check to the write, and
        the write itself only succeeds while the shelf has room, so the shelf
        can never be overfilled by concurrent placements.

        Args:
            book_id: The book to place
            shelf_id: The target shelf

        Raises:
            NotFound: If the shelf or the book does not exist
            CapacityExceeded: If the shelf is full
        """
        shelf = self.shelves.get_for_update(int(shelf_id))
        if shelf is None:
            raise NotFound("Shelf", shelf_id)
        if not self.book_access.book_exists(book_id):
            raise NotFound("Book", book_id)

        if self.book_access.current_shelf_of(book_id) == shelf_id:
            logger.info("Book %s is already on shelf %s", book_id, shelf_id)
            return

        before = ShelfOccupancy.of(self.book_access.book_count_for_shelf(shelf_id), shelf.book_capacity)
        if not before.accepts_placement():
            logger.warning("Rejected book %s: shelf %s is full", book_id, shelf_id)
            raise CapacityExceeded(shelf_id, shelf.book_capacity)

        if not self.book_access.assign_book_to_shelf(book_id, shelf_id, shelf.book_capacity):
            logger.warning("Rejected book %s: shelf %s filled up during placement", book_id, shelf_id)
            raise CapacityExceeded(shelf_id, shelf.book_capacity)

        after = ShelfOccupancy.of(self.book_access.book_count_for_shelf(shelf_id), shelf.book_capacity)
        self._check_transition(shelf_id, before, after, placing=True)
        logger.info("Placed book with id %s on shelf with id %s (%s -> %s)",
                    book_id, shelf_id, before.value, after.value)

    def remove_book_from_shelf(self, book_id: BookId) -> None:
        """Take a book off whatever shelf it is on. A no-op for an unshelved book.

        Raises:
            NotFound: If the book does not exist
        """
        if not self.book_access.book_exists(book_id):
            raise NotFound("Book", book_id)
        shelf_id = self.book_access.current_shelf_of(book_id)
        if shelf_id is None:
            return

        shelf = self.shelves.get_for_update(int(shelf_id))
        capacity = shelf.book_capacity if shelf is not None else None
        before_count = self.book_access.book_count_for_shelf(shelf_id)
        self.book_access.unassign_book(book_id)

        if capacity is None:
            # The shelf is already gone; clearing the reference repairs the book
            logger.warning("Removed book %s from missing shelf %s", book_id, shelf_id)
            return
        before = ShelfOccupancy.of(before_count, capacity)
        after = ShelfOccupancy.of(self.book_access.book_count_for_shelf(shelf_id), capacity)
        self._check_transition(shelf_id, before, after, placing=False)
        logger.info("Removed book with id %s from shelf with id %s (%s -> %s)",
                    book_id, shelf_id, before.value, after.value)

    def _check_transition(self, shelf_id: ShelfId, before: ShelfOccupancy,
                          after: ShelfOccupancy, placing: bool) -> None:
        if not before.can_transition_to(after, placing=placing):
            raise IntegrityViolation(
                f"Shelf {shelf_id} moved from {before.value} to {after.value}",
                shelf_id=int(shelf_id),
                before=before.value,
                after=after.value,
            )
