from datetime import datetime, UTC
from typing import List, Optional
from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from .models import CascadeJournal, CascadeStatus


class CascadeJournalRepository:
    """Repository for cascade journal entries."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, entry_id: int) -> Optional[CascadeJournal]:
        return self.session.get(CascadeJournal, entry_id)

    def open_entry(self, bookcase_id: int, cascade_mode: str) -> CascadeJournal:
        """Record that a bookcase deletion is about to start"""
        entry = CascadeJournal(
            operation='delete_bookcase',
            bookcase_id=bookcase_id,
            cascade_mode=cascade_mode,
            status=CascadeStatus.PENDING.value,
            attempts=1,
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def record_attempt(self, entry_id: int) -> CascadeJournal:
        """Mark an entry pending again before it is re-driven"""
        entry = self.session.get(CascadeJournal, entry_id)
        entry.status = CascadeStatus.PENDING.value
        entry.attempts += 1
        entry.started_at = datetime.now(UTC)
        self.session.flush()
        return entry

    def mark_completed(self, entry_id: int) -> None:
        entry = self.session.get(CascadeJournal, entry_id)
        entry.status = CascadeStatus.COMPLETED.value
        entry.last_error = None
        entry.finished_at = datetime.now(UTC)
        self.session.flush()

    def mark_failed(self, entry_id: int, error: str) -> None:
        entry = self.session.get(CascadeJournal, entry_id)
        entry.status = CascadeStatus.FAILED.value
        entry.last_error = error
        entry.finished_at = datetime.now(UTC)
        self.session.flush()

    def get_resumable(self, started_before: datetime, retry_failed: bool = False) -> List[CascadeJournal]:
        """Get entries a reconciliation pass should re-drive.

        Args:
            started_before: Pending entries whose last attempt started after this are left alone
            retry_failed: Also return entries that failed

        Returns:
            Entries ordered oldest first
        """
        stale_pending = (CascadeJournal.status == CascadeStatus.PENDING.value) & (
            CascadeJournal.started_at <= started_before
        )
        condition = stale_pending
        if retry_failed:
            condition = or_(stale_pending, CascadeJournal.status == CascadeStatus.FAILED.value)
        return list(self.session.scalars(
            select(CascadeJournal).where(condition).order_by(CascadeJournal.id)
        ))

    def get_by_status(self, status: CascadeStatus) -> List[CascadeJournal]:
        return list(self.session.scalars(
            select(CascadeJournal).where(CascadeJournal.status == status.value).order_by(CascadeJournal.id)
        ))
