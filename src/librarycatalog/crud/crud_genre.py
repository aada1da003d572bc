from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.locale import Locale
from ..models.genre import Genre


def get_genre(db: Session, genre_id: int) -> Optional[Genre]:
    return db.get(Genre, genre_id)


def get_genres(db: Session, locale: Locale = Locale.RU) -> List[Genre]:
    order = Genre.en_name if locale is Locale.EN else Genre.ru_name
    return list(db.scalars(select(Genre).order_by(order)).all())


def create_genre(db: Session, ru_name: str, en_name: str) -> Genre:
    db_genre = Genre(ru_name=ru_name, en_name=en_name)
    db.add(db_genre)
    db.commit()
    db.refresh(db_genre)
    return db_genre
