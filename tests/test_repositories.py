# tests/test_repositories.py
import pytest

from stacks.bookcase.models import Bookcase
from stacks.bookcase.repositories import BookcaseRepository
from stacks.catalog.models import Book, BookPlacement
from stacks.catalog.repositories import AuthorRepository, BookRepository
from stacks.errors import Conflict, InvalidArgument
from stacks.shelf.models import Shelf
from stacks.shelf.repositories import ShelfRepository


@pytest.fixture
def book_repo(db_session):
    """Fixture to create a BookRepository instance"""
    return BookRepository(db_session)


@pytest.fixture
def shelf_repo(db_session):
    return ShelfRepository(db_session)


@pytest.fixture
def bookcase_repo(db_session):
    return BookcaseRepository(db_session)


@pytest.fixture
def books(book_repo):
    """Create three unshelved books"""
    return [book_repo.create(Book(title=f"Test Book {i}")) for i in range(1, 4)]


def test_book_title_is_required():
    with pytest.raises(InvalidArgument):
        Book(title="   ")


def test_shelf_rejects_invalid_attributes():
    with pytest.raises(InvalidArgument):
        Shelf(bookcase_id=1, position=0, label="Shelf 0", book_capacity=1)
    with pytest.raises(InvalidArgument):
        Shelf(bookcase_id=1, position=1, label="", book_capacity=1)
    with pytest.raises(InvalidArgument):
        Shelf(bookcase_id=1, position=1, label="Shelf 1", book_capacity=0)


def test_bookcase_clamps_shelf_capacity():
    bookcase = Bookcase(label="Oak", location="Study", shelf_capacity=0, book_capacity_per_shelf=5)
    assert bookcase.shelf_capacity == 1
    assert bookcase.total_capacity == 5


def test_assign_shelf_if_room_stops_at_capacity(book_repo, books):
    """Test that the conditional assignment refuses once the shelf is full"""
    assert book_repo.assign_shelf_if_room(books[0].id, 10, capacity=2)
    assert book_repo.assign_shelf_if_room(books[1].id, 10, capacity=2)
    assert not book_repo.assign_shelf_if_room(books[2].id, 10, capacity=2)

    assert book_repo.count_by_shelf_id(10) == 2
    assert books[0].shelf_id == 10
    assert books[2].shelf_id is None


def test_assign_shelf_if_room_for_missing_book(book_repo):
    assert not book_repo.assign_shelf_if_room(9999, 10, capacity=5)


def test_clear_shelves_is_idempotent(book_repo, books):
    book_repo.assign_shelf_if_room(books[0].id, 10, capacity=5)
    book_repo.assign_shelf_if_room(books[1].id, 11, capacity=5)
    book_repo.assign_shelf_if_room(books[2].id, 12, capacity=5)

    cleared = book_repo.clear_shelves([10, 11])
    assert sorted(cleared) == sorted([books[0].id, books[1].id])
    assert book_repo.clear_shelves([10, 11]) == []
    assert book_repo.clear_shelves([]) == []
    assert book_repo.get_referenced_shelf_ids() == {12}


def test_delete_by_shelf_ids_empty_is_noop(book_repo, books):
    assert book_repo.delete_by_shelf_ids([]) == []
    assert all(book_repo.exists(book.id) for book in books)


def test_delete_by_shelf_ids_twice_gives_same_end_state(book_repo, books, db_session):
    book_repo.assign_shelf_if_room(books[0].id, 10, capacity=5)
    book_repo.record_placement(books[0].id, 10)
    book_repo.assign_shelf_if_room(books[1].id, 10, capacity=5)
    book_repo.assign_shelf_if_room(books[2].id, 11, capacity=5)
    first_id, second_id, third_id = (book.id for book in books)

    deleted = book_repo.delete_by_shelf_ids([10])
    assert sorted(deleted) == sorted([first_id, second_id])
    assert book_repo.delete_by_shelf_ids([10]) == []

    assert not book_repo.exists(first_id)
    assert not book_repo.exists(second_id)
    assert book_repo.exists(third_id)
    assert db_session.query(BookPlacement).filter(BookPlacement.book_id == first_id).count() == 0


def test_create_book_with_duplicate_isbn_raises_conflict(book_repo):
    book_repo.create(Book(title="First", isbn="9780593135204"))
    with pytest.raises(Conflict) as exc_info:
        book_repo.create(Book(title="Second", isbn="9780593135204"))
    assert exc_info.value.reason == Conflict.DUPLICATE_ISBN


def test_author_get_or_create_reuses_existing(db_session):
    repo = AuthorRepository(db_session)
    first = repo.get_or_create("Andy", "Weir")
    second = repo.get_or_create("Andy", "Weir")
    assert first.id == second.id
    assert first.full_name == "Andy Weir"


def test_shelf_positions_are_unique_per_bookcase(shelf_repo):
    shelf_repo.create(Shelf(bookcase_id=1, position=1, label="Shelf 1", book_capacity=5))
    shelf_repo.create(Shelf(bookcase_id=2, position=1, label="Shelf 1", book_capacity=5))
    with pytest.raises(Conflict) as exc_info:
        shelf_repo.create(Shelf(bookcase_id=1, position=1, label="Again", book_capacity=5))
    assert exc_info.value.reason == Conflict.DUPLICATE_SHELF_POSITION


def test_shelves_are_ordered_by_position(shelf_repo):
    for position in (3, 1, 2):
        shelf_repo.create(Shelf(bookcase_id=1, position=position, label=f"Shelf {position}", book_capacity=5))
    assert [shelf.position for shelf in shelf_repo.get_by_bookcase_id(1)] == [1, 2, 3]


def test_get_outside_bookcases(shelf_repo):
    kept = shelf_repo.create(Shelf(bookcase_id=1, position=1, label="Shelf 1", book_capacity=5))
    orphan = shelf_repo.create(Shelf(bookcase_id=2, position=1, label="Shelf 1", book_capacity=5))

    assert [shelf.id for shelf in shelf_repo.get_outside_bookcases([1])] == [orphan.id]
    assert {shelf.id for shelf in shelf_repo.get_outside_bookcases([])} == {kept.id, orphan.id}
    assert shelf_repo.get_existing_ids([kept.id, 9999]) == {kept.id}


def test_bookcase_label_and_location_are_unique(bookcase_repo):
    bookcase_repo.create(Bookcase(label="Oak", location="Study", shelf_capacity=1, book_capacity_per_shelf=5))
    bookcase_repo.create(Bookcase(label="Oak", location="Lounge", shelf_capacity=1, book_capacity_per_shelf=5))
    with pytest.raises(Conflict) as exc_info:
        bookcase_repo.create(Bookcase(label="Oak", location="Study", shelf_capacity=2, book_capacity_per_shelf=5))
    assert exc_info.value.reason == Conflict.DUPLICATE_BOOKCASE


def test_bookcase_locations_are_distinct(bookcase_repo):
    bookcase_repo.create(Bookcase(label="Oak", location="Study", shelf_capacity=1, book_capacity_per_shelf=5))
    bookcase_repo.create(Bookcase(label="Pine", location="Study", shelf_capacity=1, book_capacity_per_shelf=5))
    bookcase_repo.create(Bookcase(label="Oak", location="Lounge", shelf_capacity=1, book_capacity_per_shelf=5))
    assert bookcase_repo.get_all_locations() == ["Lounge", "Study"]
    assert len(bookcase_repo.get_by_location("Study")) == 2
