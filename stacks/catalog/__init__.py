# stacks/catalog/__init__.py
from .isbn import Isbn
from .models import Author, Book, BookAuthor, BookPlacement
from .repositories import AuthorRepository, BookRepository
from .service import CatalogService
from .adapters import BookAccessAdapter

__all__ = [
    'Isbn',
    'Author',
    'Book',
    'BookAuthor',
    'BookPlacement',
    'AuthorRepository',
    'BookRepository',
    'CatalogService',
    'BookAccessAdapter'
]
