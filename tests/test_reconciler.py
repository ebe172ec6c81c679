# tests/test_reconciler.py
from datetime import timedelta

import pytest

from stacks.commands import CreateBookcaseCommand, PlaceBookCommand, QueryShelfOptionsCommand, RegisterBookCommand
from stacks.config import CascadeMode
from stacks.errors import IntegrityViolation
from stacks.reconciliation.models import CascadeStatus
from stacks.reconciliation.reconciler import Reconciler


@pytest.fixture
def shelved_book(stacks):
    """A bookcase with two shelves and one book on the first shelf"""
    bookcase_id = stacks.create_bookcase(CreateBookcaseCommand(
        owner_id=None, label="Oak", zone=None, zone_index=None,
        shelf_capacity=2, book_capacity_per_shelf=3, location="Study",
    )).bookcase_id
    shelf_id = stacks.query_shelf_options(QueryShelfOptionsCommand(bookcase_id))[0].shelf_id
    book_id = stacks.register_book(RegisterBookCommand(title="Dune", authors=["Frank Herbert"]))
    stacks.place_book(PlaceBookCommand(book_id=book_id, shelf_id=shelf_id))
    return bookcase_id, shelf_id, book_id


def test_clean_database_needs_no_repair(stacks, shelved_book):
    report = stacks.reconcile()
    assert report.clean
    stacks.check_integrity()


def test_interrupted_cascade_is_resumed(stacks, shelved_book):
    """A pending entry with no completed cascade behind it looks like a crash mid-deletion"""
    bookcase_id, shelf_id, book_id = shelved_book
    with stacks.unit_of_work() as services:
        entry_id = services.journal.open_entry(int(bookcase_id), CascadeMode.UNASSIGN.value).id

    report = stacks.reconcile()

    assert report.resumed == [entry_id]
    assert report.failed == []
    with stacks.unit_of_work() as services:
        assert services.bookcase_queries.get_all() == []
        assert services.catalog.get_book(book_id).current_shelf_id is None
        assert services.journal.get_by_id(entry_id).status == CascadeStatus.COMPLETED.value


def test_resumed_cascade_keeps_its_recorded_mode(stacks, shelved_book):
    bookcase_id, shelf_id, book_id = shelved_book
    with stacks.unit_of_work() as services:
        services.journal.open_entry(int(bookcase_id), CascadeMode.DELETE.value)

    stacks.reconcile()

    with stacks.unit_of_work() as services:
        assert not services.catalog.book_exists(book_id)


def test_fresh_pending_cascade_is_left_alone(stacks, shelved_book):
    bookcase_id, shelf_id, book_id = shelved_book
    with stacks.unit_of_work() as services:
        services.journal.open_entry(int(bookcase_id), CascadeMode.UNASSIGN.value)

    reconciler = Reconciler(stacks.unit_of_work, stale_after=timedelta(hours=1))
    report = reconciler.run()

    assert report.resumed == []
    with stacks.unit_of_work() as services:
        assert len(services.journal.get_by_status(CascadeStatus.PENDING)) == 1
        assert services.bookcase_queries.find_by_id(bookcase_id)


def test_failed_cascade_waits_for_retry_failed(stacks, shelved_book):
    bookcase_id, shelf_id, book_id = shelved_book
    with stacks.unit_of_work() as services:
        entry_id = services.journal.open_entry(int(bookcase_id), CascadeMode.UNASSIGN.value).id
        services.journal.mark_failed(entry_id, "disk full")

    assert stacks.reconcile().resumed == []
    assert stacks.reconcile(retry_failed=True).resumed == [entry_id]


def test_dangling_reference_is_detected_and_repaired(stacks, shelved_book):
    bookcase_id, shelf_id, book_id = shelved_book
    with stacks.unit_of_work() as services:
        services.shelves.shelves.delete_by_ids([int(shelf_id)])

    with pytest.raises(IntegrityViolation) as exc_info:
        stacks.check_integrity()
    assert exc_info.value.details["references"] == [(int(book_id), int(shelf_id))]

    report = stacks.reconcile()

    assert [(ref.book_id, ref.shelf_id) for ref in report.dangling] == [(book_id, shelf_id)]
    stacks.check_integrity()
    with stacks.unit_of_work() as services:
        book = services.catalog.get_book(book_id)
        assert book.current_shelf_id is None
        assert [placement.shelf_id for placement in book.placements] == [int(shelf_id), None]


def test_orphaned_shelves_are_removed(stacks, shelved_book):
    bookcase_id, shelf_id, book_id = shelved_book
    with stacks.unit_of_work() as services:
        services.bookcase_lifecycle.bookcases.delete_by_id(int(bookcase_id))

    report = stacks.reconcile()

    assert len(report.removed_shelves) == 2
    assert shelf_id in report.removed_shelves
    assert stacks.query_shelf_options(QueryShelfOptionsCommand()) == []
    with stacks.unit_of_work() as services:
        assert services.catalog.get_book(book_id).current_shelf_id is None
