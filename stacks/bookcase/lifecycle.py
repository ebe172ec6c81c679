import logging
from typing import Optional

from sqlalchemy.orm import Session

from stacks.errors import Conflict, InvalidArgument, NotFound
from stacks.ids import BookcaseId
from .models import Bookcase
from .ports import ShelfAccessPort
from .repositories import BookcaseRepository

logger = logging.getLogger(__name__)


class BookcaseLifecycle:
    """Creates and deletes bookcases together with their shelves.

    Both use cases touch the shelf module only through ShelfAccessPort. They
    run inside the caller's transaction; the caller commits or rolls back.
    """

    def __init__(self, session: Session, shelf_access: ShelfAccessPort):
        self.session = session
        self.bookcases = BookcaseRepository(session)
        self.shelf_access = shelf_access

    def create_new_bookcase(
        self,
        owner_id: Optional[int],
        label: str,
        zone: Optional[str],
        zone_index: Optional[str],
        shelf_capacity: int,
        book_capacity_per_shelf: int,
        location: str,
    ) -> BookcaseId:
        """Create a bookcase and its shelves, numbered 1..shelf_capacity.

        Args:
            owner_id: Owning user, if any
            label: Bookcase label, unique per location
            zone: Optional zone within the location
            zone_index: Optional index within the zone
            shelf_capacity: Number of shelves; values below 1 become 1
            book_capacity_per_shelf: Capacity given to every shelf
            location: Where the bookcase stands

        Returns:
            ID of the new bookcase

        Raises:
            InvalidArgument: If the label or location is blank or the per-shelf capacity is below 1
            Conflict: If a bookcase with the same label already stands at the location
        """
        if label is None or not label.strip():
            raise InvalidArgument("Bookcase label cannot be blank", field="label")
        if location is None or not location.strip():
            raise InvalidArgument("Bookcase location cannot be blank", field="location")
        if book_capacity_per_shelf is None or book_capacity_per_shelf < 1:
            raise InvalidArgument("Book capacity per shelf must be at least 1", field="book_capacity_per_shelf")

        label, location = label.strip(), location.strip()
        if self.bookcases.find_by_label_location(label, location) is not None:
            raise Conflict(
                Conflict.DUPLICATE_BOOKCASE,
                f"Bookcase '{label}' already exists at {location}",
                label=label,
                location=location,
            )

        bookcase = self.bookcases.create(Bookcase(
            owner_id=owner_id,
            label=label,
            location=location,
            zone=zone,
            zone_index=zone_index,
            shelf_capacity=shelf_capacity,
            book_capacity_per_shelf=book_capacity_per_shelf,
        ))
        bookcase_id = bookcase.bookcase_id

        for position in range(1, bookcase.shelf_capacity + 1):
            self.shelf_access.create_shelf(bookcase_id, position, f"Shelf {position}", book_capacity_per_shelf)

        logger.info("Created bookcase %s '%s' at %s with %d shelves (total capacity %d)",
                    bookcase_id, label, location, bookcase.shelf_capacity, bookcase.total_capacity)
        return bookcase_id

    def delete_bookcase(self, bookcase_id: BookcaseId, missing_ok: bool = False) -> None:
        """Delete a bookcase, its shelves and, through the shelf module, its books' placements.

        Shelves are removed before the bookcase row. With missing_ok the call is
        safe to repeat, which is how an interrupted deletion is finished.

        Raises:
            NotFound: If the bookcase does not exist and missing_ok is False
        """
        bookcase = self.bookcases.get_by_id(int(bookcase_id))
        if bookcase is None and not missing_ok:
            raise NotFound("Bookcase", bookcase_id)

        shelves_deleted = self.shelf_access.delete_all_shelves_in_bookcase(bookcase_id)
        self.bookcases.delete_by_id(int(bookcase_id))
        logger.info("Deleted bookcase %s and %d shelves", bookcase_id, shelves_deleted)
