# tests/models/test_book_model.py
import pytest
from sqlalchemy.exc import IntegrityError

from librarycatalog.core.locale import Locale
from librarycatalog.models.book import Book

def test_create_book(db_session, cover_bytes, tolstoy, novel_genre, publisher):
    """Test creating a valid Book instance with its references."""
    book = Book(name="War and Peace", page_count=1225, isbn="978-5-17-090468-0",
                publish_year=1869, image=cover_bytes,
                author=tolstoy, genre=novel_genre, publisher=publisher)
    db_session.add(book)
    db_session.commit()

    retrieved_book = db_session.query(Book).filter(Book.isbn == "978-5-17-090468-0").first()

    assert retrieved_book is not None
    assert retrieved_book.id is not None
    assert retrieved_book.name == "War and Peace"
    assert retrieved_book.author.en_fio == "Leo Tolstoy"
    assert retrieved_book.genre.en_name == "Novel"
    assert retrieved_book.publisher.en_name == "Eksmo"
    # Counters and rating start at zero
    assert retrieved_book.view_count == 0
    assert retrieved_book.avg_rating == 0
    assert retrieved_book.total_vote_count == 0
    assert retrieved_book.total_rating == 0
    assert retrieved_book.content is None

def test_create_book_without_pages(db_session, cover_bytes):
    """A book must have at least one page."""
    book = Book(name="Empty", page_count=0, isbn="1234567890", image=cover_bytes)
    db_session.add(book)

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_create_book_no_name(db_session):
    """Test that creating a book without a name raises IntegrityError."""
    book = Book(page_count=10, isbn="1234567890123")
    db_session.add(book)

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_create_book_duplicate_isbn(db_session, make_book):
    """The storage layer rejects a second book with the same ISBN."""
    make_book(isbn="9999999999999")

    db_session.add(Book(name="Duplicate", page_count=5, isbn="9999999999999"))

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_author_books_back_reference(db_session, make_book, tolstoy):
    make_book(name="Anna Karenina", author=tolstoy)
    make_book(name="Resurrection", author=tolstoy)

    db_session.refresh(tolstoy)
    assert sorted(b.name for b in tolstoy.books) == ["Anna Karenina", "Resurrection"]

def test_localized_names(tolstoy, novel_genre, publisher):
    assert tolstoy.localized_fio(Locale.RU) == "Лев Толстой"
    assert tolstoy.localized_fio(Locale.EN) == "Leo Tolstoy"
    assert novel_genre.localized_name(Locale.RU) == "Роман"
    assert novel_genre.localized_name(Locale.EN) == "Novel"
    assert publisher.localized_name(Locale.EN) == "Eksmo"

def test_book_repr(make_book):
    """Test the __repr__ method of the Book model."""
    name = "Representation Test Book Name That Is Quite Long"
    book = make_book(name=name, isbn="1122334455667")

    assert repr(book) == f"<Book(id={book.id}, name='{name[:30]}', isbn='1122334455667')>"
