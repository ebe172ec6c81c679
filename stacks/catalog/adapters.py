from typing import List, Optional, Sequence

from stacks.ids import BookId, ShelfId
from stacks.shelf.ports import BookAccessPort, BriefBibliographicRecord
from .service import CatalogService


class BookAccessAdapter(BookAccessPort):
    """Serves the shelf module's BookAccessPort from the catalog."""

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    def get_book_ids_by_shelf_id(self, shelf_id: ShelfId) -> List[BookId]:
        return self.catalog.book_ids_on_shelf(shelf_id)

    def book_count_for_shelf(self, shelf_id: ShelfId) -> int:
        return self.catalog.count_on_shelf(shelf_id)

    def book_count_for_shelves(self, shelf_ids: Sequence[ShelfId]) -> int:
        return self.catalog.count_on_shelves(shelf_ids)

    def book_exists(self, book_id: BookId) -> bool:
        return self.catalog.book_exists(book_id)

    def current_shelf_of(self, book_id: BookId) -> Optional[ShelfId]:
        return self.catalog.get_book(book_id).current_shelf_id

    def assign_book_to_shelf(self, book_id: BookId, shelf_id: ShelfId, capacity: int) -> bool:
        return self.catalog._assign_if_room(book_id, shelf_id, capacity)

    def unassign_book(self, book_id: BookId) -> None:
        self.catalog.unassign(book_id)

    def delete_books_on_shelves(self, shelf_ids: Sequence[ShelfId]) -> None:
        self.catalog.delete_books_on_shelves(shelf_ids)

    def unassign_books_on_shelves(self, shelf_ids: Sequence[ShelfId]) -> None:
        self.catalog.unassign_books_on_shelves(shelf_ids)

    def get_brief_records_by_shelf_id(self, shelf_id: ShelfId) -> List[BriefBibliographicRecord]:
        return [
            BriefBibliographicRecord(
                book_id=book.book_id,
                title=book.title,
                authors=[author.full_name for author in book.authors],
                isbn=book.isbn,
                publisher=book.publisher,
                publication_year=book.publication_year,
            )
            for book in self.catalog.books_on_shelf(shelf_id)
        ]
