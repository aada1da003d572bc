from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.locale import Locale
from ..models.publisher import Publisher


def get_publisher(db: Session, publisher_id: int) -> Optional[Publisher]:
    return db.get(Publisher, publisher_id)


def get_publishers(db: Session, locale: Locale = Locale.RU) -> List[Publisher]:
    """Lists every publisher ordered by its name in the given locale."""
    order = Publisher.en_name if locale is Locale.EN else Publisher.ru_name
    return list(db.scalars(select(Publisher).order_by(order)).all())


def create_publisher(db: Session, ru_name: str, en_name: str) -> Publisher:
    db_publisher = Publisher(ru_name=ru_name, en_name=en_name)
    db.add(db_publisher)
    db.commit()
    db.refresh(db_publisher)
    return db_publisher
