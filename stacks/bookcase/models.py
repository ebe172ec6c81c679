# stacks/bookcase/models.py
from sqlalchemy import Integer, String, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from stacks.db.base import Base, TimestampMixin
from stacks.ids import BookcaseId


class Bookcase(Base, TimestampMixin):
    __tablename__ = 'bookcase'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    zone: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zone_index: Mapped[str | None] = mapped_column(String(50), nullable=True)
    shelf_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    book_capacity_per_shelf: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint('label', 'location', name='uix_bookcase_label_location'),
        Index('idx_bookcase_location', 'location'),
        Index('idx_bookcase_owner_id', 'owner_id'),
    )

    @validates('shelf_capacity')
    def validate_shelf_capacity(self, key, shelf_capacity):
        # A bookcase always has at least one shelf
        return max(1, shelf_capacity or 0)

    @property
    def bookcase_id(self) -> BookcaseId:
        return BookcaseId(self.id)

    @property
    def total_capacity(self) -> int:
        return self.shelf_capacity * self.book_capacity_per_shelf

    def __repr__(self):
        return f'<Bookcase {self.id}: {self.label} @ {self.location}>'
