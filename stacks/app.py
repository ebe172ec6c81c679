"""
Composition root.

Wires the catalog, shelf and bookcase modules together through their ports
and exposes one handler per command. Each handler runs in its own
request-scoped transaction and returns plain values, never ORM objects.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from .bookcase import BookcaseLifecycle, BookcaseQueries, ShelfAccessPort
from .catalog import BookAccessAdapter, CatalogService
from .commands import (
    CreateBookcaseCommand, CreateBookcaseResult, DeleteBookcaseCommand,
    PlaceBookCommand, QueryShelfOptionsCommand, RegisterBookCommand, RemoveBookCommand
)
from .config import CascadeMode, Settings
from .db import Database
from .errors import IntegrityViolation
from .ids import BookId
from .reconciliation import CascadeJournalRepository, Reconciler, ReconciliationReport
from .shelf import (
    BookAccessPort, BookDisposal, PlacementService, ShelfAccessAdapter, ShelfOption, ShelfService
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Every service of the engine, bound to one session"""
    session: Session
    catalog: CatalogService
    book_access: BookAccessPort
    shelves: ShelfService
    placement: PlacementService
    shelf_access: ShelfAccessPort
    bookcase_lifecycle: BookcaseLifecycle
    bookcase_queries: BookcaseQueries
    journal: CascadeJournalRepository

    @classmethod
    def build(cls, session: Session, disposal: BookDisposal = BookDisposal.UNASSIGN) -> "Services":
        catalog = CatalogService(session)
        book_access = BookAccessAdapter(catalog)
        shelves = ShelfService(session, book_access, disposal=disposal)
        shelf_access = ShelfAccessAdapter(shelves)
        return cls(
            session=session,
            catalog=catalog,
            book_access=book_access,
            shelves=shelves,
            placement=PlacementService(session, book_access),
            shelf_access=shelf_access,
            bookcase_lifecycle=BookcaseLifecycle(session, shelf_access),
            bookcase_queries=BookcaseQueries(session, shelf_access),
            journal=CascadeJournalRepository(session),
        )


class Stacks:
    def __init__(self, database: Database, settings: Optional[Settings] = None):
        self.database = database
        self.settings = settings or Settings()
        self.reconciler = Reconciler(self.unit_of_work, self.settings.cascade_stale_after)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Stacks":
        """Build the engine from settings, reading the environment when none are given"""
        settings = settings or Settings.from_env()
        database = Database(settings.database_url, busy_timeout_ms=settings.sqlite_busy_timeout_ms)
        return cls(database, settings)

    def init_db(self) -> None:
        self.database.init_db()

    @contextmanager
    def unit_of_work(self, cascade_mode: Optional[CascadeMode] = None) -> Iterator[Services]:
        """Open a transaction and yield the services bound to it.

        Commits when the block exits normally and rolls back on any exception.
        """
        mode = cascade_mode or self.settings.cascade_mode
        with self.database.get_db() as session:
            yield Services.build(session, BookDisposal(mode.value))

    def create_bookcase(self, command: CreateBookcaseCommand) -> CreateBookcaseResult:
        """Create a bookcase and all its shelves in one transaction"""
        with self.unit_of_work() as services:
            bookcase_id = services.bookcase_lifecycle.create_new_bookcase(
                owner_id=command.owner_id,
                label=command.label,
                zone=command.zone,
                zone_index=command.zone_index,
                shelf_capacity=command.shelf_capacity,
                book_capacity_per_shelf=command.book_capacity_per_shelf,
                location=command.location,
            )
        return CreateBookcaseResult(bookcase_id=bookcase_id)

    def delete_bookcase(self, command: DeleteBookcaseCommand) -> None:
        """Delete a bookcase through a journaled cascade.

        The journal entry is committed on its own first. The cascade and the
        completion mark then commit together, so the entry stays pending only
        if the process dies in between; the reconciler picks it up from there.

        Raises:
            NotFound: If the bookcase does not exist
        """
        mode = self.settings.cascade_mode
        with self.unit_of_work() as services:
            services.bookcase_queries.find_by_id(command.bookcase_id)
            entry_id = services.journal.open_entry(int(command.bookcase_id), mode.value).id

        try:
            with self.unit_of_work(cascade_mode=mode) as services:
                services.bookcase_lifecycle.delete_bookcase(command.bookcase_id)
                services.journal.mark_completed(entry_id)
        except Exception as e:
            logger.error("Deletion of bookcase %s failed (journal entry %s): %s",
                         command.bookcase_id, entry_id, e, exc_info=True)
            try:
                with self.unit_of_work() as services:
                    services.journal.mark_failed(entry_id, str(e))
            except Exception:
                # The entry stays pending and the reconciler resumes it
                logger.error("Could not mark journal entry %s as failed", entry_id, exc_info=True)
            raise

    def place_book(self, command: PlaceBookCommand) -> None:
        with self.unit_of_work() as services:
            services.placement.place_book_on_shelf(command.book_id, command.shelf_id)

    def remove_book(self, command: RemoveBookCommand) -> None:
        with self.unit_of_work() as services:
            services.placement.remove_book_from_shelf(command.book_id)

    def query_shelf_options(self, command: QueryShelfOptionsCommand) -> List[ShelfOption]:
        with self.unit_of_work() as services:
            if command.bookcase_id is not None:
                services.bookcase_queries.find_by_id(command.bookcase_id)
            return services.shelves.shelf_options(command.bookcase_id)

    def register_book(self, command: RegisterBookCommand) -> BookId:
        with self.unit_of_work() as services:
            return services.catalog.register_book(
                title=command.title,
                authors=command.authors,
                isbn=command.isbn,
                publisher=command.publisher,
                publication_year=command.publication_year,
                description=command.description,
            )

    def reconcile(self, retry_failed: bool = False) -> ReconciliationReport:
        return self.reconciler.run(retry_failed=retry_failed)

    def check_integrity(self) -> None:
        """Raise IntegrityViolation if any book references a missing shelf"""
        dangling = self.reconciler.find_dangling_references()
        if dangling:
            raise IntegrityViolation(
                f"{len(dangling)} books reference shelves that no longer exist",
                references=[(int(ref.book_id), int(ref.shelf_id)) for ref in dangling],
            )
