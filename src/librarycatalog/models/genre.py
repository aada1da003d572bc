from sqlalchemy import Column, Integer, String
from librarycatalog.db.session import Base
from librarycatalog.core.locale import Locale

class Genre(Base):
    __tablename__ = "genre"

    id = Column(Integer, primary_key=True)
    ru_name = Column(String(100), nullable=False)
    en_name = Column(String(100), nullable=False)

    def localized_name(self, locale: Locale) -> str:
        return self.en_name if locale is Locale.EN else self.ru_name

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, en_name='{self.en_name}')>"
