# tests/conftest.py
import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add the src directory to the Python path so the package imports without installation
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from librarycatalog.db.session import Base, register_sqlite_functions
# Import all models to ensure they are registered with Base
from librarycatalog.models import Author, Book, Genre, Publisher
from librarycatalog.crud import create_author, create_genre, create_publisher

# --- Test Database Setup ---
# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

# 250 bytes starting with a JPEG signature: large enough to count as a cover
COVER_BYTES = b"\xff\xd8\xff\xe0" + bytes(range(246))
PDF_BYTES = b"%PDF-1.4\n" + b"0" * 300


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
    register_sqlite_functions(engine)
    Base.metadata.create_all(bind=engine)
    yield engine


@pytest.fixture(scope="session")
def db_session_factory(db_engine):
    """Returns a SQLAlchemy session factory."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(db_engine, db_session_factory):
    """Provides a transactional scope around a test function."""
    connection = db_engine.connect()
    transaction = connection.begin()
    session = db_session_factory(bind=connection)

    try:
        yield session
    finally:
        session.close()
        # Rollback the transaction after the test, unless it was already rolled back
        if transaction.is_active:
            transaction.rollback()
        connection.close()


# --- Reference data and book helpers ---

@pytest.fixture
def cover_bytes():
    return COVER_BYTES


@pytest.fixture
def pdf_bytes():
    return PDF_BYTES


@pytest.fixture
def tolstoy(db_session) -> Author:
    return create_author(db_session, ru_fio="Лев Толстой", en_fio="Leo Tolstoy")


@pytest.fixture
def dostoevsky(db_session) -> Author:
    return create_author(db_session, ru_fio="Фёдор Достоевский", en_fio="Fyodor Dostoevsky")


@pytest.fixture
def novel_genre(db_session) -> Genre:
    return create_genre(db_session, ru_name="Роман", en_name="Novel")


@pytest.fixture
def poetry_genre(db_session) -> Genre:
    return create_genre(db_session, ru_name="Поэзия", en_name="Poetry")


@pytest.fixture
def publisher(db_session) -> Publisher:
    return create_publisher(db_session, ru_name="Эксмо", en_name="Eksmo")


@pytest.fixture
def make_book(db_session, cover_bytes):
    """Factory persisting a valid book; keyword arguments override the defaults."""
    counter = {"n": 0}

    def _make_book(**fields) -> Book:
        counter["n"] += 1
        values = {
            "name": f"Book {counter['n']}",
            "page_count": 100,
            "isbn": f"978000000{counter['n']:04d}",
            "publish_year": 2000,
            "image": cover_bytes,
        }
        values.update(fields)
        book = Book(**values)
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return _make_book
