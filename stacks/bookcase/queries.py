from typing import List

from sqlalchemy.orm import Session

from stacks.errors import NotFound
from stacks.ids import BookcaseId
from .models import Bookcase
from .ports import ShelfAccessPort, ShelfSlot
from .repositories import BookcaseRepository


class BookcaseQueries:
    """Read-only views over bookcases"""

    def __init__(self, session: Session, shelf_access: ShelfAccessPort):
        self.bookcases = BookcaseRepository(session)
        self.shelf_access = shelf_access

    def find_by_id(self, bookcase_id: BookcaseId) -> Bookcase:
        bookcase = self.bookcases.get_by_id(int(bookcase_id))
        if bookcase is None:
            raise NotFound("Bookcase", bookcase_id)
        return bookcase

    def get_all(self) -> List[Bookcase]:
        return self.bookcases.get_all()

    def get_all_locations(self) -> List[str]:
        return self.bookcases.get_all_locations()

    def find_by_location(self, location: str) -> List[Bookcase]:
        return self.bookcases.get_by_location(location)

    def find_by_owner(self, owner_id: int) -> List[Bookcase]:
        return self.bookcases.get_by_owner(owner_id)

    def shelf_slots(self, bookcase_id: BookcaseId) -> List[ShelfSlot]:
        self.find_by_id(bookcase_id)
        return self.shelf_access.shelf_slots(bookcase_id)

    def all_ids(self) -> List[BookcaseId]:
        return [BookcaseId(bookcase_id) for bookcase_id in self.bookcases.get_all_ids()]
