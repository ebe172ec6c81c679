# stacks/reconciliation/models.py
from datetime import datetime, UTC
from enum import Enum
from sqlalchemy import Integer, String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from stacks.db.base import Base, TimestampMixin


class CascadeStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class CascadeJournal(Base, TimestampMixin):
    """Durable progress record of one bookcase deletion.

    The entry is committed as pending before the cascade starts, so a crash
    in the middle leaves something for the reconciler to find.
    """
    __tablename__ = 'cascade_journal'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    operation: Mapped[str] = mapped_column(String(50), nullable=False, default='delete_bookcase')
    bookcase_id: Mapped[int] = mapped_column(Integer, nullable=False)
    cascade_mode: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=CascadeStatus.PENDING.value)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(UTC))
    finished_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index('idx_cascade_journal_status', 'status'),
        Index('idx_cascade_journal_bookcase_id', 'bookcase_id'),
    )

    def __repr__(self):
        return f'<CascadeJournal {self.id}: {self.operation} bookcase {self.bookcase_id} [{self.status}]>'
