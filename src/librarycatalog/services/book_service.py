"""
Book service: a thin facade over the book persistence functions.

Adds what the CRUD layer does not know about: not-found failures, locale-driven
search dispatch, search-term normalization and the rating computation.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from librarycatalog import crud
from librarycatalog.core.exceptions import BookNotFoundError
from librarycatalog.core.locale import AuthorNameField, Locale
from librarycatalog.models.book import Book
from librarycatalog.schemas.book import BookCover, RatingCreate
from librarycatalog.schemas.page import Page, SortDirection

logger = logging.getLogger(__name__)


def _search_terms(terms: Tuple[str, ...]) -> Tuple[str, str]:
    """
    Normalizes search terms to a (name, author) pair. A single term is used
    for both the book name and the author name.
    """
    if len(terms) == 1:
        return terms[0], terms[0]
    if len(terms) == 2:
        return terms[0], terms[1]
    raise ValueError(f"search expects 1 or 2 terms, got {len(terms)}")


class BookService:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, sort_field: Optional[str] = None,
                direction: SortDirection = SortDirection.ASC) -> List[Book]:
        return crud.get_all_books(self.db, sort_field, direction)

    def get_page(self, page: int, size: int, sort_field: str = "name",
                 direction: SortDirection = SortDirection.ASC) -> Page[Book]:
        """One page of the catalogue, books without content."""
        return crud.get_books_page(self.db, page, size, sort_field, direction)

    def get(self, book_id: int) -> Book:
        """
        Returns the book with the given id.

        Raises:
            BookNotFoundError: If no such book exists.
        """
        book = crud.get_book_by_id(self.db, book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def save(self, book: Book) -> Book:
        return crud.save_book(self.db, book)

    def delete(self, book: Book) -> None:
        stored = crud.get_book_by_id(self.db, book.id) if book.id is not None else None
        if stored is None:
            raise BookNotFoundError(book.id)
        crud.delete_book(self.db, stored)

    def delete_by_id(self, book_id: int) -> None:
        self.delete(self.get(book_id))

    def search(self, *terms: str, locale: Locale) -> List[Book]:
        """
        Books whose name, or whose author's name in `locale`, contains the
        search term (case-insensitive), ordered by name.

        Args:
            *terms (str): One term, or a (name term, author term) pair.
            locale (Locale): Selects the Russian or English author name column.
        """
        name_term, fio_term = _search_terms(terms)
        return crud.search_books(self.db, name_term, fio_term, AuthorNameField.for_locale(locale))

    def search_page(self, page: int, size: int, sort_field: str, direction: SortDirection,
                    *terms: str, locale: Locale) -> Page[Book]:
        name_term, fio_term = _search_terms(terms)
        return crud.search_books_page(
            self.db, name_term, fio_term, AuthorNameField.for_locale(locale),
            page, size, sort_field, direction,
        )

    def find_top_books(self, limit: int) -> List[BookCover]:
        """The `limit` most viewed books, id and cover only."""
        return [BookCover.model_validate(row) for row in crud.get_top_books(self.db, limit)]

    def find_by_genre(self, page: int, size: int, sort_field: str, direction: SortDirection,
                      genre_id: int) -> Page[Book]:
        return crud.get_books_by_genre(self.db, genre_id, page, size, sort_field, direction)

    def get_content(self, book_id: int) -> Optional[bytes]:
        return crud.get_book_content(self.db, book_id)

    def update_content(self, book_id: int, content: Optional[bytes]) -> bool:
        return crud.update_content(self.db, book_id, content)

    def update_view_count(self, book_id: int, view_count: int) -> bool:
        """Sets the view count directly; the caller computes the new value."""
        return crud.update_view_count(self.db, book_id, view_count)

    def update_rating(self, book_id: int, total_rating: int, total_vote_count: int,
                      avg_rating: int) -> bool:
        return crud.update_rating(self.db, book_id, total_rating, total_vote_count, avg_rating)

    def rate_book(self, book_id: int, rating: RatingCreate) -> Book:
        """
        Adds one score to a book and rewrites its rating triple.

        Args:
            book_id (int): Id of the rated book.
            rating (RatingCreate): The score, 1 to 5.

        Returns:
            Book: The book with its updated rating.
        """
        book = self.get(book_id)
        total_rating = (book.total_rating or 0) + rating.score
        total_vote_count = (book.total_vote_count or 0) + 1
        avg_rating = round(total_rating / total_vote_count)
        self.update_rating(book_id, total_rating, total_vote_count, avg_rating)
        logger.info(f"Book {book_id} rated {rating.score}; average is now {avg_rating}.")
        return self.get(book_id)

    def get_all_isbn(self, exclude_id: Optional[int] = None) -> List[str]:
        return crud.get_all_isbn(self.db, exclude_id)
