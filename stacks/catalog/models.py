# stacks/catalog/models.py
from datetime import datetime, UTC
from sqlalchemy import Integer, String, ForeignKey, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column, validates

from stacks.db.base import Base, TimestampMixin
from stacks.errors import InvalidArgument
from stacks.ids import AuthorId, BookId, ShelfId


class Author(Base, TimestampMixin):
    __tablename__ = 'author'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    book_authors = relationship('BookAuthor', back_populates='author')
    books = relationship('Book', secondary='book_author', viewonly=True)

    __table_args__ = (
        UniqueConstraint('first_name', 'last_name', name='uix_author_name'),
    )

    @property
    def author_id(self) -> AuthorId:
        return AuthorId(self.id)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class BookAuthor(Base, TimestampMixin):
    __tablename__ = 'book_author'

    book_id: Mapped[int] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey('author.id'), primary_key=True)
    role: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Relationships
    book = relationship('Book', back_populates='book_authors')
    author = relationship('Author', back_populates='book_authors')


class BookPlacement(Base):
    """Append-only history of shelf assignments. A null shelf_id records a removal."""
    __tablename__ = 'book_placement'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey('book.id', ondelete='CASCADE'), nullable=False)
    shelf_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    placed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(UTC))

    book = relationship('Book', back_populates='placements')

    __table_args__ = (
        Index('idx_book_placement_book_id', 'book_id'),
    )


class Book(Base, TimestampMixin):
    __tablename__ = 'book'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    isbn: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    publication_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    # Owned by the shelf module; kept as a plain reference, not a foreign key
    shelf_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    book_authors = relationship('BookAuthor', back_populates='book', cascade='all, delete-orphan')
    placements = relationship(
        'BookPlacement', back_populates='book',
        cascade='all, delete-orphan', order_by='BookPlacement.id'
    )

    # Convenience relationships
    authors = relationship('Author', secondary='book_author', viewonly=True)

    __table_args__ = (
        Index('idx_book_shelf_id', 'shelf_id'),
        Index('idx_book_title', 'title'),
    )

    @validates('title')
    def validate_title(self, key, title):
        if title is None or not title.strip():
            raise InvalidArgument("Book title cannot be blank", field="title")
        return title.strip()

    @property
    def book_id(self) -> BookId:
        return BookId(self.id)

    @property
    def current_shelf_id(self) -> ShelfId | None:
        return ShelfId(self.shelf_id) if self.shelf_id is not None else None
