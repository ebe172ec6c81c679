# stacks/shelf/models.py
from sqlalchemy import Integer, String, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from stacks.db.base import Base, TimestampMixin
from stacks.errors import InvalidArgument
from stacks.ids import BookcaseId, ShelfId


class Shelf(Base, TimestampMixin):
    """A capacity-bounded shelf in a bookcase.

    The books on a shelf are not stored here; membership is always asked of the
    catalog module through its port.
    """
    __tablename__ = 'shelf'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Owned by the bookcase module; kept as a plain reference, not a foreign key
    bookcase_id: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    book_capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint('bookcase_id', 'position', name='uix_shelf_bookcase_position'),
        Index('idx_shelf_bookcase_id', 'bookcase_id'),
    )

    @validates('bookcase_id')
    def validate_bookcase_id(self, key, bookcase_id):
        if bookcase_id is None:
            raise InvalidArgument("Bookcase ID cannot be null", field="bookcase_id")
        return bookcase_id

    @validates('position')
    def validate_position(self, key, position):
        if position is None or position < 1:
            raise InvalidArgument("Shelf position must be greater than 0", field="position")
        return position

    @validates('label')
    def validate_label(self, key, label):
        if label is None or not label.strip():
            raise InvalidArgument("Shelf label cannot be null or blank", field="label")
        return label

    @validates('book_capacity')
    def validate_book_capacity(self, key, book_capacity):
        if book_capacity is None or book_capacity < 1:
            raise InvalidArgument("Book capacity must be at least 1", field="book_capacity")
        return book_capacity

    @property
    def shelf_id(self) -> ShelfId:
        return ShelfId(self.id)

    @property
    def parent_id(self) -> BookcaseId:
        return BookcaseId(self.bookcase_id)

    def __repr__(self):
        return f'<Shelf {self.id}: {self.label} (bookcase {self.bookcase_id}, position {self.position})>'
