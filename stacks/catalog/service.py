import logging
from typing import List, Optional, Sequence, Set, Tuple, Union

from sqlalchemy.orm import Session

from stacks.errors import Conflict, InvalidArgument, NotFound
from stacks.ids import AuthorId, BookId, ShelfId
from .isbn import Isbn
from .models import Book, BookPlacement
from .repositories import AuthorRepository, BookRepository

logger = logging.getLogger(__name__)

AuthorName = Union[str, Tuple[str, str]]


def split_author_name(name: AuthorName) -> Tuple[str, str]:
    """Split "First Last" into (first, last); a single word becomes the last name"""
    if isinstance(name, tuple):
        first, last = name
    else:
        parts = name.strip().rsplit(" ", 1)
        first, last = (parts[0], parts[1]) if len(parts) == 2 else ("", parts[0])
    first, last = first.strip(), last.strip()
    if not last:
        raise InvalidArgument("Author name cannot be blank", field="authors")
    return first, last


class CatalogService:
    """Owns book and author records, including each book's current shelf."""

    def __init__(self, session: Session):
        self.session = session
        self.books = BookRepository(session)
        self.authors = AuthorRepository(session)

    def add_author(self, first_name: str, last_name: str) -> AuthorId:
        first, last = split_author_name((first_name, last_name))
        return self.authors.get_or_create(first, last).author_id

    def register_book(
        self,
        title: str,
        authors: Sequence[AuthorName] = (),
        isbn: Optional[str] = None,
        publisher: Optional[str] = None,
        publication_year: Optional[int] = None,
        description: Optional[str] = None,
    ) -> BookId:
        """Create a new, unshelved book.

        Args:
            title: Book title
            authors: Author names as "First Last" strings or (first, last) tuples
            isbn: Optional ISBN-10/13, hyphens allowed
            publisher: Optional publisher
            publication_year: Optional year of publication
            description: Optional free-text description

        Returns:
            ID of the new book

        Raises:
            InvalidArgument: If the title, ISBN or an author name is invalid
            Conflict: If a book with the same ISBN is already catalogued
        """
        normalized_isbn = Isbn(isbn).normalized() if isbn is not None else None
        names = [split_author_name(name) for name in authors]

        if normalized_isbn and self.books.get_by_isbn(normalized_isbn):
            raise Conflict(
                Conflict.DUPLICATE_ISBN,
                f"A book with ISBN {isbn} already exists",
                isbn=normalized_isbn,
            )

        book = Book(
            title=title,
            isbn=normalized_isbn,
            publisher=publisher,
            publication_year=publication_year,
            description=description,
        )
        author_records = [self.authors.get_or_create(first, last) for first, last in names]
        self.books.create(book, author_records)
        logger.info("Registered book %s: %s", book.id, book.title)
        return book.book_id

    def get_book(self, book_id: BookId) -> Book:
        book = self.books.get_by_id(int(book_id))
        if book is None:
            raise NotFound("Book", book_id)
        return book

    def book_exists(self, book_id: BookId) -> bool:
        return self.books.exists(int(book_id))

    def books_on_shelf(self, shelf_id: ShelfId) -> List[Book]:
        return self.books.get_by_shelf_id(int(shelf_id))

    def unshelved_books(self) -> List[Book]:
        return self.books.get_unshelved()

    def placement_history(self, book_id: BookId) -> List[BookPlacement]:
        self.get_book(book_id)
        return self.books.get_placement_history(int(book_id))

    # Shelf assignment, called through BookAccessAdapter.

    def count_on_shelf(self, shelf_id: ShelfId) -> int:
        return self.books.count_by_shelf_id(int(shelf_id))

    def count_on_shelves(self, shelf_ids: Sequence[ShelfId]) -> int:
        return self.books.count_by_shelf_ids([int(s) for s in shelf_ids])

    def book_ids_on_shelf(self, shelf_id: ShelfId) -> List[BookId]:
        return [BookId(book_id) for book_id in self.books.get_ids_by_shelf_id(int(shelf_id))]

    def _assign_if_room(self, book_id: BookId, shelf_id: ShelfId, capacity: int) -> bool:
        """Point a book at a shelf unless the shelf holds `capacity` books already.

        The shelf id is not checked. PlacementService verifies and locks the
        shelf first; callers reach this only through BookAccessAdapter.
        """
        assigned = self.books.assign_shelf_if_room(int(book_id), int(shelf_id), capacity)
        if assigned:
            self.books.record_placement(int(book_id), int(shelf_id))
        return assigned

    def unassign(self, book_id: BookId) -> None:
        self.books.clear_shelf(int(book_id))
        self.books.record_placement(int(book_id), None)

    def unassign_books_on_shelves(self, shelf_ids: Sequence[ShelfId]) -> List[BookId]:
        book_ids = self.books.clear_shelves([int(s) for s in shelf_ids])
        if book_ids:
            self.books.record_placements(book_ids, None)
            logger.info("Unassigned %d books from shelves %s", len(book_ids), [int(s) for s in shelf_ids])
        return [BookId(book_id) for book_id in book_ids]

    def delete_books_on_shelves(self, shelf_ids: Sequence[ShelfId]) -> List[BookId]:
        book_ids = self.books.delete_by_shelf_ids([int(s) for s in shelf_ids])
        if book_ids:
            logger.info("Deleted %d books from shelves %s", len(book_ids), [int(s) for s in shelf_ids])
        return [BookId(book_id) for book_id in book_ids]

    def referenced_shelf_ids(self) -> Set[ShelfId]:
        return {ShelfId(shelf_id) for shelf_id in self.books.get_referenced_shelf_ids()}
