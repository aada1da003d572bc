from .author import Author
from .book import Book
from .genre import Genre
from .publisher import Publisher

__all__ = ["Author", "Book", "Genre", "Publisher"]
