from typing import Iterable, List, Optional, Set
from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased, joinedload

from stacks.errors import Conflict
from .models import Author, Book, BookAuthor, BookPlacement


class AuthorRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_name(self, first_name: str, last_name: str) -> Optional[Author]:
        """Get an author by exact first and last name"""
        return self.session.query(Author).filter(
            Author.first_name == first_name,
            Author.last_name == last_name
        ).first()

    def get_or_create(self, first_name: str, last_name: str) -> Author:
        """Find an author by name, creating it when missing"""
        author = self.get_by_name(first_name, last_name)
        if author is None:
            author = Author(first_name=first_name, last_name=last_name)
            self.session.add(author)
            self.session.flush()
        return author


class BookRepository:
    """Repository for Book entities and their shelf assignment."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """Get a book by its ID"""
        return self.session.get(Book, book_id)

    def get_by_isbn(self, isbn: str) -> Optional[Book]:
        """Get a book by its normalized ISBN"""
        return self.session.query(Book).filter(Book.isbn == isbn).first()

    def exists(self, book_id: int) -> bool:
        return self.session.query(Book.id).filter(Book.id == book_id).first() is not None

    def create(self, book: Book, authors: Iterable[Author] = ()) -> Book:
        """Persist a new book with its author links.

        Raises:
            Conflict: If another book already carries the same ISBN
        """
        for author in authors:
            book.book_authors.append(BookAuthor(author=author, role='author'))
        self.session.add(book)
        try:
            self.session.flush()
        except IntegrityError:
            raise Conflict(
                Conflict.DUPLICATE_ISBN,
                f"A book with ISBN {book.isbn} already exists",
                isbn=book.isbn,
            )
        return book

    def get_by_shelf_id(self, shelf_id: int) -> List[Book]:
        """Get every book currently assigned to a shelf, with authors loaded"""
        return (
            self.session.query(Book)
            .options(joinedload(Book.book_authors).joinedload(BookAuthor.author))
            .filter(Book.shelf_id == shelf_id)
            .order_by(Book.title.asc(), Book.id.asc())
            .all()
        )

    def get_ids_by_shelf_id(self, shelf_id: int) -> List[int]:
        return list(self.session.scalars(
            select(Book.id).where(Book.shelf_id == shelf_id).order_by(Book.id)
        ))

    def get_ids_by_shelf_ids(self, shelf_ids: List[int]) -> List[int]:
        if not shelf_ids:
            return []
        return list(self.session.scalars(
            select(Book.id).where(Book.shelf_id.in_(shelf_ids)).order_by(Book.id)
        ))

    def get_unshelved(self) -> List[Book]:
        """Get books that are not on any shelf"""
        return self.session.query(Book).filter(Book.shelf_id.is_(None)).order_by(Book.title).all()

    def count_by_shelf_id(self, shelf_id: int) -> int:
        return self.session.scalar(
            select(func.count(Book.id)).where(Book.shelf_id == shelf_id)
        ) or 0

    def count_by_shelf_ids(self, shelf_ids: List[int]) -> int:
        if not shelf_ids:
            return 0
        return self.session.scalar(
            select(func.count(Book.id)).where(Book.shelf_id.in_(shelf_ids))
        ) or 0

    def assign_shelf_if_room(self, book_id: int, shelf_id: int, capacity: int) -> bool:
        """Move a book onto a shelf only while the shelf holds fewer than capacity books.

        The occupancy count and the write are one UPDATE statement, so two
        placements racing for the last slot cannot both succeed.

        Returns:
            True if the book was assigned, False if the shelf was full or the book is gone
        """
        occupant = aliased(Book)
        occupied = (
            select(func.count(occupant.id))
            .where(occupant.shelf_id == shelf_id)
            .scalar_subquery()
        )
        result = self.session.execute(
            update(Book)
            .where(Book.id == book_id, occupied < capacity)
            .values(shelf_id=shelf_id)
            .execution_options(synchronize_session=False)
        )
        self._expire_shelf_id(book_id)
        return result.rowcount == 1

    def clear_shelf(self, book_id: int) -> None:
        self.session.execute(
            update(Book)
            .where(Book.id == book_id)
            .values(shelf_id=None)
            .execution_options(synchronize_session=False)
        )
        self._expire_shelf_id(book_id)

    def clear_shelves(self, shelf_ids: List[int]) -> List[int]:
        """Clear the shelf of every book on the given shelves.

        Returns:
            IDs of the books that were unassigned
        """
        book_ids = self.get_ids_by_shelf_ids(shelf_ids)
        if book_ids:
            self.session.execute(
                update(Book).where(Book.id.in_(book_ids)).values(shelf_id=None)
            )
        return book_ids

    def delete_by_shelf_ids(self, shelf_ids: List[int]) -> List[int]:
        """Delete every book on the given shelves along with its author links and history.

        Returns:
            IDs of the deleted books
        """
        book_ids = self.get_ids_by_shelf_ids(shelf_ids)
        if book_ids:
            self.session.execute(delete(BookAuthor).where(BookAuthor.book_id.in_(book_ids)))
            self.session.execute(delete(BookPlacement).where(BookPlacement.book_id.in_(book_ids)))
            self.session.execute(delete(Book).where(Book.id.in_(book_ids)))
        return book_ids

    def get_referenced_shelf_ids(self) -> Set[int]:
        """Get every shelf ID that at least one book points at"""
        return set(self.session.scalars(
            select(Book.shelf_id).where(Book.shelf_id.is_not(None)).distinct()
        ))

    def record_placement(self, book_id: int, shelf_id: Optional[int]) -> BookPlacement:
        placement = BookPlacement(book_id=book_id, shelf_id=shelf_id)
        self.session.add(placement)
        self.session.flush()
        return placement

    def record_placements(self, book_ids: List[int], shelf_id: Optional[int]) -> None:
        self.session.add_all(BookPlacement(book_id=book_id, shelf_id=shelf_id) for book_id in book_ids)
        self.session.flush()

    def get_placement_history(self, book_id: int) -> List[BookPlacement]:
        return (
            self.session.query(BookPlacement)
            .filter(BookPlacement.book_id == book_id)
            .order_by(BookPlacement.id.asc())
            .all()
        )

    def _expire_shelf_id(self, book_id: int) -> None:
        # Core UPDATEs bypass the identity map; refresh any loaded copy on next access
        book = self.session.identity_map.get(self.session.identity_key(Book, book_id))
        if book is not None:
            self.session.expire(book, ['shelf_id'])
