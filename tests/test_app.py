# tests/test_app.py
import threading
from datetime import datetime, timedelta, UTC
from unittest.mock import patch

import pytest

from stacks.bookcase.lifecycle import BookcaseLifecycle
from stacks.commands import (
    CreateBookcaseCommand, DeleteBookcaseCommand, PlaceBookCommand,
    QueryShelfOptionsCommand, RegisterBookCommand, RemoveBookCommand
)
from stacks.errors import CapacityExceeded, Conflict, IntegrityViolation, NotFound, StorageUnavailable
from stacks.ids import BookcaseId
from stacks.reconciliation.journal import CascadeJournalRepository
from stacks.reconciliation.models import CascadeStatus
from stacks.shelf.service import ShelfService


def create_bookcase(stacks, label="Oak", location="Study", shelves=3, capacity=5):
    result = stacks.create_bookcase(CreateBookcaseCommand(
        owner_id=1,
        label=label,
        zone=None,
        zone_index=None,
        shelf_capacity=shelves,
        book_capacity_per_shelf=capacity,
        location=location,
    ))
    return result.bookcase_id


def shelf_ids_of(stacks, bookcase_id):
    return [option.shelf_id for option in stacks.query_shelf_options(QueryShelfOptionsCommand(bookcase_id))]


def register_books(stacks, how_many):
    return [stacks.register_book(RegisterBookCommand(title=f"Book {i}")) for i in range(1, how_many + 1)]


def test_bookcase_scenario_fill_a_shelf_then_delete(stacks):
    """3 shelves of 5: the sixth book on a shelf is refused, deletion leaves nothing dangling"""
    bookcase_id = create_bookcase(stacks)
    options = stacks.query_shelf_options(QueryShelfOptionsCommand(bookcase_id))
    assert [(option.position, option.label, option.capacity) for option in options] == [
        (1, "Shelf 1", 5), (2, "Shelf 2", 5), (3, "Shelf 3", 5)
    ]
    with stacks.unit_of_work() as services:
        assert services.bookcase_queries.find_by_id(bookcase_id).total_capacity == 15

    first_shelf = options[0].shelf_id
    book_ids = register_books(stacks, 6)
    for book_id in book_ids[:5]:
        stacks.place_book(PlaceBookCommand(book_id=book_id, shelf_id=first_shelf))

    with stacks.unit_of_work() as services:
        assert services.shelves.is_full(first_shelf)
    with pytest.raises(CapacityExceeded):
        stacks.place_book(PlaceBookCommand(book_id=book_ids[5], shelf_id=first_shelf))

    [option] = [o for o in stacks.query_shelf_options(QueryShelfOptionsCommand(bookcase_id))
                if o.shelf_id == first_shelf]
    assert option.current_count == 5
    assert not option.has_space

    stacks.delete_bookcase(DeleteBookcaseCommand(bookcase_id=bookcase_id))

    assert stacks.query_shelf_options(QueryShelfOptionsCommand()) == []
    stacks.check_integrity()
    with stacks.unit_of_work() as services:
        # Unassign is the default: the catalog records survive
        assert len(services.catalog.unshelved_books()) == 6
        [completed] = services.journal.get_by_status(CascadeStatus.COMPLETED)
        assert completed.bookcase_id == int(bookcase_id)


def test_delete_mode_removes_books_with_their_shelves(deleting_stacks):
    bookcase_id = create_bookcase(deleting_stacks, shelves=2, capacity=2)
    shelf_id = shelf_ids_of(deleting_stacks, bookcase_id)[0]
    placed, unshelved = register_books(deleting_stacks, 2)
    deleting_stacks.place_book(PlaceBookCommand(book_id=placed, shelf_id=shelf_id))

    deleting_stacks.delete_bookcase(DeleteBookcaseCommand(bookcase_id=bookcase_id))

    with deleting_stacks.unit_of_work() as services:
        assert not services.catalog.book_exists(placed)
        assert services.catalog.book_exists(unshelved)


def test_duplicate_bookcase_is_a_conflict(stacks):
    create_bookcase(stacks)
    with pytest.raises(Conflict) as exc_info:
        create_bookcase(stacks, shelves=1)
    assert exc_info.value.reason == Conflict.DUPLICATE_BOOKCASE

    with stacks.unit_of_work() as services:
        assert len(services.bookcase_queries.get_all()) == 1
    assert len(stacks.query_shelf_options(QueryShelfOptionsCommand())) == 3


def test_failed_shelf_creation_leaves_no_partial_bookcase(stacks):
    real_create_shelf = ShelfService.create_shelf

    def fail_on_second_shelf(self, bookcase_id, position, label, capacity):
        if position == 2:
            raise Conflict(Conflict.DUPLICATE_SHELF_POSITION, "simulated failure")
        return real_create_shelf(self, bookcase_id, position, label, capacity)

    with patch.object(ShelfService, "create_shelf", fail_on_second_shelf):
        with pytest.raises(Conflict):
            create_bookcase(stacks)

    with stacks.unit_of_work() as services:
        assert services.bookcase_queries.get_all() == []
    assert stacks.query_shelf_options(QueryShelfOptionsCommand()) == []


def test_delete_unknown_bookcase_opens_no_journal_entry(stacks):
    with pytest.raises(NotFound):
        stacks.delete_bookcase(DeleteBookcaseCommand(bookcase_id=BookcaseId(404)))
    with stacks.unit_of_work() as services:
        assert services.journal.get_resumable(started_before=_far_future(), retry_failed=True) == []


def test_failed_cascade_is_journaled_and_rolled_back(stacks):
    bookcase_id = create_bookcase(stacks, shelves=2, capacity=2)
    shelf_id = shelf_ids_of(stacks, bookcase_id)[0]
    [book_id] = register_books(stacks, 1)
    stacks.place_book(PlaceBookCommand(book_id=book_id, shelf_id=shelf_id))

    with patch.object(BookcaseLifecycle, "delete_bookcase", side_effect=IntegrityViolation("simulated crash")):
        with pytest.raises(IntegrityViolation):
            stacks.delete_bookcase(DeleteBookcaseCommand(bookcase_id=bookcase_id))

    with stacks.unit_of_work() as services:
        [entry] = services.journal.get_by_status(CascadeStatus.FAILED)
        entry_id = entry.id
        assert entry.last_error == "simulated crash"
        assert services.bookcase_queries.find_by_id(bookcase_id)
        assert services.catalog.get_book(book_id).current_shelf_id == shelf_id

    report = stacks.reconcile(retry_failed=True)

    assert report.resumed == [entry_id]
    assert shelf_ids_of_all(stacks) == []
    with stacks.unit_of_work() as services:
        assert services.catalog.get_book(book_id).current_shelf_id is None
        assert services.journal.get_by_id(entry_id).attempts == 2


def test_cascade_error_survives_a_failing_journal_update(stacks):
    bookcase_id = create_bookcase(stacks, shelves=1)

    with patch.object(BookcaseLifecycle, "delete_bookcase", side_effect=IntegrityViolation("simulated crash")), \
            patch.object(CascadeJournalRepository, "mark_failed", side_effect=StorageUnavailable("locked")):
        with pytest.raises(IntegrityViolation) as exc_info:
            stacks.delete_bookcase(DeleteBookcaseCommand(bookcase_id=bookcase_id))
    assert exc_info.value.message == "simulated crash"

    with stacks.unit_of_work() as services:
        [entry] = services.journal.get_by_status(CascadeStatus.PENDING)
        assert entry.bookcase_id == int(bookcase_id)


def test_remove_book_command(stacks):
    bookcase_id = create_bookcase(stacks, shelves=1, capacity=1)
    shelf_id = shelf_ids_of(stacks, bookcase_id)[0]
    first, second = register_books(stacks, 2)

    stacks.place_book(PlaceBookCommand(book_id=first, shelf_id=shelf_id))
    stacks.remove_book(RemoveBookCommand(book_id=first))
    stacks.place_book(PlaceBookCommand(book_id=second, shelf_id=shelf_id))

    with stacks.unit_of_work() as services:
        assert services.catalog.get_book(second).current_shelf_id == shelf_id


def test_query_options_for_unknown_bookcase(stacks):
    with pytest.raises(NotFound):
        stacks.query_shelf_options(QueryShelfOptionsCommand(BookcaseId(404)))


def test_concurrent_placements_never_overfill_a_shelf(stacks):
    """Two placements race for the last slot: exactly one wins"""
    bookcase_id = create_bookcase(stacks, shelves=1, capacity=1)
    shelf_id = shelf_ids_of(stacks, bookcase_id)[0]
    book_ids = register_books(stacks, 2)

    barrier = threading.Barrier(len(book_ids))
    outcomes = []
    lock = threading.Lock()

    def place(book_id):
        barrier.wait()
        try:
            stacks.place_book(PlaceBookCommand(book_id=book_id, shelf_id=shelf_id))
            outcome = "placed"
        except CapacityExceeded:
            outcome = "rejected"
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=place, args=(book_id,)) for book_id in book_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert sorted(outcomes) == ["placed", "rejected"]
    with stacks.unit_of_work() as services:
        assert services.book_access.book_count_for_shelf(shelf_id) == 1


def shelf_ids_of_all(stacks):
    return [option.shelf_id for option in stacks.query_shelf_options(QueryShelfOptionsCommand())]


def _far_future():
    return datetime.now(UTC) + timedelta(days=1)
