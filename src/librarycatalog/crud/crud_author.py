"""
CRUD operations for the Author model.
Authors are reference data: the book workflow only reads them. Creation is
used by seeding scripts and tests.
"""

import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.locale import Locale
from ..models.author import Author


def get_author(db: Session, author_id: int) -> Optional[Author]:
    """
    Retrieves an author by id.

    Args:
        db (Session): SQLAlchemy session.
        author_id (int): Id of the author.

    Returns:
        Optional[Author]: The author, or None if it does not exist.
    """
    return db.get(Author, author_id)


def get_authors(db: Session, locale: Locale = Locale.RU) -> List[Author]:
    """Lists every author ordered by full name in the given locale."""
    order = Author.en_fio if locale is Locale.EN else Author.ru_fio
    return list(db.scalars(select(Author).order_by(order)).all())


def create_author(db: Session, ru_fio: str, en_fio: str,
                  birthday: Optional[datetime.date] = None) -> Author:
    db_author = Author(ru_fio=ru_fio, en_fio=en_fio, birthday=birthday)
    db.add(db_author)
    db.commit()
    db.refresh(db_author)
    return db_author
