"""
CRUD operations for the Book model.
Lookup, save and delete, sorted/paginated listings, locale-selectable search,
genre filtering, the top-N projection and the single-row partial updates
(content, view count, rating triple). Each write is its own transaction.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, defer

from ..core.locale import AuthorNameField
from ..models.author import Author
from ..models.book import Book
from ..schemas.page import Page, SortDirection

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id": Book.id,
    "name": Book.name,
    "page_count": Book.page_count,
    "isbn": Book.isbn,
    "publish_year": Book.publish_year,
    "avg_rating": Book.avg_rating,
    "view_count": Book.view_count,
}

AUTHOR_NAME_COLUMNS = {
    AuthorNameField.RU_FIO: Author.ru_fio,
    AuthorNameField.EN_FIO: Author.en_fio,
}


def _order_by(sort_field: str, direction: SortDirection):
    try:
        column = SORTABLE_FIELDS[sort_field]
    except KeyError:
        raise ValueError(f"Cannot sort books by '{sort_field}'") from None
    return column.desc() if SortDirection(direction) is SortDirection.DESC else column.asc()


def _paginate(db: Session, stmt, page: int, size: int) -> Page[Book]:
    if page < 0 or size < 1:
        raise ValueError(f"Invalid page request: page={page}, size={size}")
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    items = db.scalars(stmt.offset(page * size).limit(size)).all()
    return Page(items=list(items), number=page, size=size, total=total or 0)


def _search_filter(name_term: str, fio_term: str, author_field: AuthorNameField):
    fio_column = AUTHOR_NAME_COLUMNS[author_field]
    return or_(
        Book.name.icontains(name_term, autoescape=True),
        fio_column.icontains(fio_term, autoescape=True),
    )


def get_book_by_id(db: Session, book_id: int) -> Optional[Book]:
    """
    Retrieves a book by its primary key.

    Args:
        db (Session): SQLAlchemy session.
        book_id (int): Id of the book.

    Returns:
        Optional[Book]: The book, or None if it does not exist.
    """
    return db.get(Book, book_id)


def get_all_books(db: Session, sort_field: Optional[str] = None,
                  direction: SortDirection = SortDirection.ASC) -> List[Book]:
    """Lists every book, optionally sorted by one of `SORTABLE_FIELDS`."""
    stmt = select(Book)
    if sort_field:
        stmt = stmt.order_by(_order_by(sort_field, direction))
    return list(db.scalars(stmt).all())


def get_books_page(db: Session, page: int, size: int, sort_field: str,
                   direction: SortDirection) -> Page[Book]:
    """
    Returns one page of books without loading their content.

    Args:
        db (Session): SQLAlchemy session.
        page (int): 0-based page number.
        size (int): Page size.
        sort_field (str): One of `SORTABLE_FIELDS`.
        direction (SortDirection): Sort direction.

    Returns:
        Page[Book]: The requested page.
    """
    stmt = select(Book).options(defer(Book.content)).order_by(_order_by(sort_field, direction))
    return _paginate(db, stmt, page, size)


def search_books(db: Session, name_term: str, fio_term: str,
                 author_field: AuthorNameField) -> List[Book]:
    """
    Finds books whose name contains `name_term` or whose author's name (in the
    column selected by `author_field`) contains `fio_term`, ignoring case.
    Results are ordered by book name.
    """
    stmt = (
        select(Book)
        .outerjoin(Author, Book.author_id == Author.id)
        .where(_search_filter(name_term, fio_term, author_field))
        .order_by(Book.name)
    )
    return list(db.scalars(stmt).all())


def search_books_page(db: Session, name_term: str, fio_term: str,
                      author_field: AuthorNameField, page: int, size: int,
                      sort_field: str, direction: SortDirection) -> Page[Book]:
    """Paginated `search_books`: ordered by name first, then by the requested field."""
    stmt = (
        select(Book)
        .options(defer(Book.content))
        .outerjoin(Author, Book.author_id == Author.id)
        .where(_search_filter(name_term, fio_term, author_field))
        .order_by(Book.name, _order_by(sort_field, direction))
    )
    return _paginate(db, stmt, page, size)


def get_books_by_genre(db: Session, genre_id: int, page: int, size: int,
                       sort_field: str, direction: SortDirection) -> Page[Book]:
    """One page of the books of a genre, content not loaded."""
    stmt = (
        select(Book)
        .options(defer(Book.content))
        .where(Book.genre_id == genre_id)
        .order_by(_order_by(sort_field, direction))
    )
    return _paginate(db, stmt, page, size)


def get_top_books(db: Session, limit: int) -> list:
    """
    Returns the `limit` most viewed books, projected to id and image only.
    Returns a list of Rows with `id` and `image`.
    """
    stmt = (
        select(Book.id, Book.image)
        .order_by(Book.view_count.desc(), Book.id)
        .limit(limit)
    )
    return list(db.execute(stmt).all())


def get_book_content(db: Session, book_id: int) -> Optional[bytes]:
    """Returns the raw PDF bytes of a book, or None when none is stored (or the book is missing)."""
    return db.scalar(select(Book.content).where(Book.id == book_id))


def get_all_isbn(db: Session, exclude_id: Optional[int] = None) -> List[str]:
    """
    Lists every stored ISBN except the one of book `exclude_id`.
    With `exclude_id=None` all ISBNs are returned.
    """
    stmt = select(Book.isbn).where(Book.isbn.is_not(None))
    if exclude_id is not None:
        stmt = stmt.where(Book.id != exclude_id)
    return list(db.scalars(stmt).all())


def save_book(db: Session, book: Book) -> Book:
    """
    Inserts a new book or updates an existing one, in a single transaction.

    Args:
        db (Session): SQLAlchemy session.
        book (Book): Book to persist; its id is assigned on insert.

    Returns:
        Book: The persisted book, refreshed from the database.
    """
    is_new = book.id is None
    db.add(book)
    try:
        db.commit()
        db.refresh(book)
        logger.info(f"Book {book.id} {'created' if is_new else 'updated'} (isbn={book.isbn}).")
    except Exception as e:
        logger.exception(f"Error committing book '{book.name}': {e}")
        db.rollback()
        raise
    return book


def delete_book(db: Session, book: Book) -> None:
    book_id = book.id
    try:
        db.delete(book)
        db.commit()
        logger.info(f"Book {book_id} deleted.")
    except Exception as e:
        logger.exception(f"Error deleting book {book_id}: {e}")
        db.rollback()
        raise


def _update_book_fields(db: Session, book_id: int, what: str, **values) -> bool:
    try:
        result = db.execute(update(Book).where(Book.id == book_id).values(**values))
        db.commit()
    except Exception as e:
        logger.exception(f"Error updating {what} of book {book_id}: {e}")
        db.rollback()
        raise
    if result.rowcount == 0:
        logger.warning(f"Attempted to update {what} of non-existent book ID: {book_id}")
        return False
    logger.info(f"Book {book_id}: {what} updated.")
    return True


def update_content(db: Session, book_id: int, content: Optional[bytes]) -> bool:
    """Replaces the PDF content of a book. Returns False if the book does not exist."""
    return _update_book_fields(db, book_id, "content", content=content)


def update_view_count(db: Session, book_id: int, view_count: int) -> bool:
    """Sets the view count of a book to `view_count`. Returns False if the book does not exist."""
    return _update_book_fields(db, book_id, "view count", view_count=view_count)


def update_rating(db: Session, book_id: int, total_rating: int, total_vote_count: int,
                  avg_rating: int) -> bool:
    """
    Overwrites the rating triple of a book in one statement.

    Returns:
        bool: False if the book does not exist.
    """
    return _update_book_fields(
        db, book_id, "rating",
        total_rating=total_rating,
        total_vote_count=total_vote_count,
        avg_rating=avg_rating,
    )
