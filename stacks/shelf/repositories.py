from typing import Iterable, List, Optional, Set
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stacks.errors import Conflict
from .models import Shelf


class ShelfRepository:
    """Repository for managing Shelf entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, shelf_id: int) -> Optional[Shelf]:
        """Get a shelf by its ID.

        Args:
            shelf_id: The ID of the shelf to retrieve

        Returns:
            The Shelf object if found, None otherwise
        """
        return self.session.get(Shelf, shelf_id)

    def get_for_update(self, shelf_id: int) -> Optional[Shelf]:
        """Get a shelf and lock its row until the transaction ends.

        Placements on the same shelf queue behind this lock. SQLite has no row
        locks; there the whole transaction already holds the write lock.

        Args:
            shelf_id: The ID of the shelf to lock

        Returns:
            The Shelf object if found, None otherwise
        """
        return self.session.scalars(
            select(Shelf).where(Shelf.id == shelf_id).with_for_update()
        ).first()

    def get_by_bookcase_id(self, bookcase_id: int, for_update: bool = False) -> List[Shelf]:
        """Get all shelves of a bookcase, ordered by position.

        Args:
            bookcase_id: The ID of the parent bookcase
            for_update: Lock the shelf rows until the transaction ends

        Returns:
            List of Shelf objects
        """
        stmt = select(Shelf).where(Shelf.bookcase_id == bookcase_id).order_by(Shelf.position)
        if for_update:
            stmt = stmt.with_for_update()
        return list(self.session.scalars(stmt))

    def get_all(self) -> List[Shelf]:
        return list(self.session.scalars(
            select(Shelf).order_by(Shelf.bookcase_id, Shelf.position)
        ))

    def get_existing_ids(self, shelf_ids: Iterable[int]) -> Set[int]:
        """Get the subset of the given IDs that belong to existing shelves"""
        ids = list(shelf_ids)
        if not ids:
            return set()
        return set(self.session.scalars(select(Shelf.id).where(Shelf.id.in_(ids))))

    def get_outside_bookcases(self, bookcase_ids: Iterable[int], for_update: bool = False) -> List[Shelf]:
        """Get shelves whose bookcase is not among the given IDs"""
        stmt = (
            select(Shelf)
            .where(Shelf.bookcase_id.not_in(list(bookcase_ids)))
            .order_by(Shelf.bookcase_id, Shelf.position)
        )
        if for_update:
            stmt = stmt.with_for_update()
        return list(self.session.scalars(stmt))

    def create(self, shelf: Shelf) -> Shelf:
        """Persist a new shelf.

        Args:
            shelf: The shelf to persist

        Returns:
            The created Shelf object

        Raises:
            Conflict: If the bookcase already has a shelf at the same position
        """
        self.session.add(shelf)
        try:
            self.session.flush()
        except IntegrityError:
            raise Conflict(
                Conflict.DUPLICATE_SHELF_POSITION,
                f"Bookcase {shelf.bookcase_id} already has a shelf at position {shelf.position}",
                bookcase_id=shelf.bookcase_id,
                position=shelf.position,
            )
        return shelf

    def delete_by_bookcase_id(self, bookcase_id: int) -> int:
        """Delete every shelf of a bookcase.

        Args:
            bookcase_id: The ID of the parent bookcase

        Returns:
            Number of shelves deleted
        """
        result = self.session.execute(delete(Shelf).where(Shelf.bookcase_id == bookcase_id))
        return result.rowcount

    def delete_by_ids(self, shelf_ids: List[int]) -> int:
        if not shelf_ids:
            return 0
        result = self.session.execute(delete(Shelf).where(Shelf.id.in_(shelf_ids)))
        return result.rowcount
