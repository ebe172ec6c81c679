"""
Reconciler

Finishes bookcase deletions that were interrupted and repairs whatever an
interrupted cascade could have left behind: books pointing at shelves that
no longer exist, and shelves whose bookcase no longer exists.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from typing import TYPE_CHECKING, Callable, ContextManager, List

from stacks.config import CascadeMode
from stacks.ids import BookcaseId, BookId, ShelfId

if TYPE_CHECKING:
    from stacks.app import Services

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DanglingReference:
    """A book whose shelf no longer exists"""
    book_id: BookId
    shelf_id: ShelfId


@dataclass
class ReconciliationReport:
    resumed: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    dangling: List[DanglingReference] = field(default_factory=list)
    removed_shelves: List[ShelfId] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        """True when the pass found nothing to do"""
        return not (self.resumed or self.failed or self.dangling or self.removed_shelves)


class Reconciler:
    """
    Runs one reconciliation pass.

    Every step uses its own unit of work, so one failing journal entry does
    not hold back the others.
    """

    def __init__(self, unit_of_work: Callable[..., ContextManager["Services"]], stale_after: timedelta):
        """
        Args:
            unit_of_work: Factory for request-scoped transactions; accepts an optional cascade_mode
            stale_after: How long a pending cascade may run before it is considered interrupted
        """
        self.unit_of_work = unit_of_work
        self.stale_after = stale_after

    def run(self, retry_failed: bool = False) -> ReconciliationReport:
        report = ReconciliationReport()
        self._resume_cascades(report, retry_failed)
        report.dangling = self._repair_dangling_references()
        report.removed_shelves = self._remove_orphaned_shelves()

        if report.clean:
            logger.info("Reconciliation found nothing to repair")
        else:
            logger.info(
                "Reconciliation finished: %d cascades resumed, %d failed, %d dangling books repaired, "
                "%d orphaned shelves removed",
                len(report.resumed), len(report.failed), len(report.dangling), len(report.removed_shelves),
            )
        return report

    def find_dangling_references(self) -> List[DanglingReference]:
        with self.unit_of_work() as services:
            return self._dangling(services)

    def _resume_cascades(self, report: ReconciliationReport, retry_failed: bool) -> None:
        cutoff = datetime.now(UTC) - self.stale_after
        with self.unit_of_work() as services:
            entries = [
                (entry.id, entry.bookcase_id, entry.cascade_mode)
                for entry in services.journal.get_resumable(cutoff, retry_failed=retry_failed)
            ]

        for entry_id, bookcase_id, cascade_mode in entries:
            logger.info("Resuming deletion of bookcase %s (journal entry %s)", bookcase_id, entry_id)
            try:
                with self.unit_of_work(cascade_mode=CascadeMode(cascade_mode)) as services:
                    services.journal.record_attempt(entry_id)
                    services.bookcase_lifecycle.delete_bookcase(BookcaseId(bookcase_id), missing_ok=True)
                    services.journal.mark_completed(entry_id)
            except Exception as e:
                logger.error("Could not resume journal entry %s: %s", entry_id, e, exc_info=True)
                with self.unit_of_work() as services:
                    services.journal.mark_failed(entry_id, str(e))
                report.failed.append(entry_id)
            else:
                report.resumed.append(entry_id)

    def _repair_dangling_references(self) -> List[DanglingReference]:
        with self.unit_of_work() as services:
            dangling = self._dangling(services)
            if not dangling:
                return []
            for reference in dangling:
                logger.warning("Integrity violation: book %s references missing shelf %s; unassigning it",
                               reference.book_id, reference.shelf_id)
            missing = sorted({reference.shelf_id for reference in dangling})
            services.book_access.unassign_books_on_shelves(missing)
            return dangling

    def _remove_orphaned_shelves(self) -> List[ShelfId]:
        with self.unit_of_work() as services:
            live = services.bookcase_queries.all_ids()
            return services.shelves.delete_orphaned_shelves(live)

    @staticmethod
    def _dangling(services: "Services") -> List[DanglingReference]:
        referenced = services.catalog.referenced_shelf_ids()
        missing = sorted(referenced - services.shelves.existing_shelf_ids(referenced))
        return [
            DanglingReference(book_id=book_id, shelf_id=shelf_id)
            for shelf_id in missing
            for book_id in services.book_access.get_book_ids_by_shelf_id(shelf_id)
        ]
