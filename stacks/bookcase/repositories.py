from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stacks.errors import Conflict
from .models import Bookcase


class BookcaseRepository:
    """Repository for managing Bookcase entities."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, bookcase_id: int) -> Optional[Bookcase]:
        return self.session.get(Bookcase, bookcase_id)

    def find_by_label_location(self, label: str, location: str) -> Optional[Bookcase]:
        """Get the bookcase with this exact label at this location, if any"""
        return self.session.scalars(
            select(Bookcase).where(Bookcase.label == label, Bookcase.location == location)
        ).first()

    def get_all(self) -> List[Bookcase]:
        return list(self.session.scalars(select(Bookcase).order_by(Bookcase.location, Bookcase.label)))

    def get_by_location(self, location: str) -> List[Bookcase]:
        return list(self.session.scalars(
            select(Bookcase).where(Bookcase.location == location).order_by(Bookcase.zone_index, Bookcase.label)
        ))

    def get_by_owner(self, owner_id: int) -> List[Bookcase]:
        return list(self.session.scalars(
            select(Bookcase).where(Bookcase.owner_id == owner_id).order_by(Bookcase.id)
        ))

    def get_all_locations(self) -> List[str]:
        return list(self.session.scalars(
            select(Bookcase.location).distinct().order_by(Bookcase.location)
        ))

    def get_all_ids(self) -> List[int]:
        return list(self.session.scalars(select(Bookcase.id).order_by(Bookcase.id)))

    def create(self, bookcase: Bookcase) -> Bookcase:
        """Persist a new bookcase.

        Raises:
            Conflict: If a bookcase with the same label already stands at the location
        """
        self.session.add(bookcase)
        try:
            self.session.flush()
        except IntegrityError:
            raise Conflict(
                Conflict.DUPLICATE_BOOKCASE,
                f"Bookcase '{bookcase.label}' already exists at {bookcase.location}",
                label=bookcase.label,
                location=bookcase.location,
            )
        return bookcase

    def delete_by_id(self, bookcase_id: int) -> int:
        result = self.session.execute(delete(Bookcase).where(Bookcase.id == bookcase_id))
        return result.rowcount
