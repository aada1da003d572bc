"""
ORM model for the Author entity. Full names are stored in both catalogue languages.
"""

from sqlalchemy import Column, Integer, String, Date
from sqlalchemy.orm import relationship
from librarycatalog.db.session import Base
from librarycatalog.core.locale import Locale

class Author(Base):
    """
    Represents a book author.

    Attributes:
        id (int): Primary key.
        ru_fio (str): Full name in Russian.
        en_fio (str): Full name in English.
        birthday (date): Optional date of birth.
        books (List[Book]): Books by this author, loaded lazily and never owned.
    """
    __tablename__ = "author"

    id = Column(Integer, primary_key=True)
    ru_fio = Column(String(255), nullable=False, index=True)
    en_fio = Column(String(255), nullable=False, index=True)
    birthday = Column(Date, nullable=True)

    books = relationship("Book", back_populates="author", lazy="select")

    def localized_fio(self, locale: Locale) -> str:
        return self.en_fio if locale is Locale.EN else self.ru_fio

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, en_fio='{self.en_fio}')>"
