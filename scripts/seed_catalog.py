"""
Development seeding script for the library catalogue.

Creates genres, publishers and authors, then books (through the regular book
editing workflow, so they get the placeholder cover and are validated), and
finally some random ratings and views. Uses Faker for names and ISBNs.

Usage:
    python scripts/seed_catalog.py [--books N]

Note:
    - Books whose ISBN is already taken are skipped by the workflow's duplicate check.
"""

import argparse
import logging
import random
import sys
from typing import List, Optional

from faker import Faker
from sqlalchemy.orm import Session

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

try:
    from librarycatalog.core.locale import Locale
    from librarycatalog.crud import create_author, create_genre, create_publisher, get_genres
    from librarycatalog.db.session import SessionLocal, init_db
    from librarycatalog.schemas.book import BookEditModel, RatingCreate
    from librarycatalog.services.book_editor import BookEditor
    from librarycatalog.services.book_service import BookService
    MODELS_LOADED = True
except ImportError as e:
    logger.error(f"Error importing project modules: {e}.")
    logger.error("Make sure you ran 'uv pip install -e \".[seed]\"'")
    MODELS_LOADED = False
    sys.exit(1)

GENRES = [
    ("Роман", "Novel"),
    ("Поэзия", "Poetry"),
    ("Фантастика", "Science fiction"),
    ("Детектив", "Detective"),
    ("Биография", "Biography"),
    ("История", "History"),
]
NUM_PUBLISHERS: int = 5
NUM_AUTHORS: int = 15
DEFAULT_NUM_BOOKS: int = 40
MAX_RATINGS_PER_BOOK: int = 12

fake_ru = Faker('ru_RU')
fake_en = Faker('en_US')


def seed_reference_data(db: Session) -> None:
    if get_genres(db):
        logger.info("Reference data already present, skipping.")
        return

    for ru_name, en_name in GENRES:
        create_genre(db, ru_name=ru_name, en_name=en_name)
    for _ in range(NUM_PUBLISHERS):
        create_publisher(db, ru_name=fake_ru.company(), en_name=fake_en.company())
    for _ in range(NUM_AUTHORS):
        create_author(db, ru_fio=fake_ru.name(), en_fio=fake_en.name(),
                      birthday=fake_en.date_of_birth(minimum_age=25, maximum_age=90))
    logger.info(f"Created {len(GENRES)} genres, {NUM_PUBLISHERS} publishers, {NUM_AUTHORS} authors.")


def seed_books(db: Session, num_books: int) -> List[int]:
    editor = BookEditor(db, Locale.EN)
    form = editor.new_book_form()
    author_ids = [a.id for a in form.all_authors]
    genre_ids = [g.id for g in form.all_genres]
    publisher_ids = [p.id for p in form.all_publishers]

    book_ids: List[int] = []
    for i in range(num_books):
        model = BookEditModel(
            name=fake_en.sentence(nb_words=random.randint(1, 4)).rstrip("."),
            page_count=random.randint(40, 1200),
            isbn=fake_en.isbn13() if random.random() < 0.7 else fake_en.isbn10(),
            publish_year=random.randint(1800, 2024),
            author_id=random.choice(author_ids),
            genre_id=random.choice(genre_ids),
            publisher_id=random.choice(publisher_ids),
            description=fake_en.paragraph(nb_sentences=3),
        )
        result = editor.process(model)
        if result.saved:
            book_ids.append(result.book.id)
            logger.info(f"  ({i+1}/{num_books}) Added: '{result.book.name}' (ISBN: {result.book.isbn})")
        else:
            logger.warning(f"  ({i+1}/{num_books}) Skipped '{model.name}': {'; '.join(result.errors)}")
    return book_ids


def seed_activity(db: Session, book_ids: List[int]) -> None:
    service = BookService(db)
    for book_id in book_ids:
        for _ in range(random.randint(0, MAX_RATINGS_PER_BOOK)):
            service.rate_book(book_id, RatingCreate(score=random.randint(1, 5)))
        service.update_view_count(book_id, random.randint(0, 500))


def main(num_books: int) -> None:
    if not MODELS_LOADED:
        return

    db: Optional[Session] = None
    try:
        init_db()
        db = SessionLocal()
        seed_reference_data(db)
        book_ids = seed_books(db, num_books)
        seed_activity(db, book_ids)
        logger.info(f"--- Seeding finished: {len(book_ids)} books added. ---")
    except Exception as e:
        logger.exception(f"Critical error while seeding: {e}")
        if db:
            db.rollback()
    finally:
        if db:
            db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the library catalogue with fake data.")
    parser.add_argument("--books", type=int, default=DEFAULT_NUM_BOOKS)
    args = parser.parse_args()
    main(args.books)
