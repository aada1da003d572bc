from .crud_author import get_author, get_authors, create_author
from .crud_genre import get_genre, get_genres, create_genre
from .crud_publisher import get_publisher, get_publishers, create_publisher
from .crud_book import (
    get_book_by_id,
    get_all_books,
    get_books_page,
    search_books,
    search_books_page,
    get_books_by_genre,
    get_top_books,
    get_book_content,
    get_all_isbn,
    save_book,
    delete_book,
    update_content,
    update_view_count,
    update_rating,
)

__all__ = [
    "get_author",
    "get_authors",
    "create_author",
    "get_genre",
    "get_genres",
    "create_genre",
    "get_publisher",
    "get_publishers",
    "create_publisher",
    "get_book_by_id",
    "get_all_books",
    "get_books_page",
    "search_books",
    "search_books_page",
    "get_books_by_genre",
    "get_top_books",
    "get_book_content",
    "get_all_isbn",
    "save_book",
    "delete_book",
    "update_content",
    "update_view_count",
    "update_rating",
]
