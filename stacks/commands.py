"""Commands accepted by the stacks engine and the results it hands back.

Inbound adapters such as the CLI build these; the engine never sees raw
transport data.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from .ids import BookcaseId, BookId, ShelfId


@dataclass(frozen=True)
class CreateBookcaseCommand:
    owner_id: Optional[int]
    label: str
    zone: Optional[str]
    zone_index: Optional[str]
    shelf_capacity: int
    book_capacity_per_shelf: int
    location: str


@dataclass(frozen=True)
class CreateBookcaseResult:
    bookcase_id: BookcaseId


@dataclass(frozen=True)
class DeleteBookcaseCommand:
    bookcase_id: BookcaseId


@dataclass(frozen=True)
class PlaceBookCommand:
    book_id: BookId
    shelf_id: ShelfId


@dataclass(frozen=True)
class RemoveBookCommand:
    book_id: BookId


@dataclass(frozen=True)
class QueryShelfOptionsCommand:
    """List placement targets; without a bookcase every shelf is listed"""
    bookcase_id: Optional[BookcaseId] = None


@dataclass(frozen=True)
class RegisterBookCommand:
    title: str
    authors: Sequence[Union[str, Tuple[str, str]]] = ()
    isbn: Optional[str] = None
    publisher: Optional[str] = None
    publication_year: Optional[int] = None
    description: Optional[str] = None
