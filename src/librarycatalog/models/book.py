"""
ORM model for the Book entity of the library catalog.
Defines the bibliographic fields, the cover and PDF blobs, the rating triple and
the many-to-one links to genre, author and publisher.
"""

from sqlalchemy import (Column, Integer, BigInteger, String, Text, LargeBinary,
                        ForeignKey, CheckConstraint)
from sqlalchemy.orm import relationship, deferred
from librarycatalog.db.session import Base

class Book(Base):
    """
    Represents a book in the catalogue.

    Attributes:
        id (int): Primary key, assigned by the database on insert.
        name (str): Book title, never empty.
        content (bytes): PDF body. Deferred: only loaded when accessed.
        page_count (int): Number of pages, at least 1.
        isbn (str): ISBN as entered (hyphens allowed), unique.
        genre, author, publisher: Reference data, read-only from the book's side.
        publish_year (int): Year of publication, 0 when unknown.
        image (bytes): Cover image.
        avg_rating (int): Rounded average score.
        total_vote_count (int): Number of scores received.
        total_rating (int): Sum of all scores.
        view_count (int): Number of times the content was delivered.
        description (str): Free text description.
    """
    __tablename__ = "book"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), index=True, nullable=False)
    content = deferred(Column(LargeBinary, nullable=True))
    page_count = Column(Integer, nullable=False)
    isbn = Column(String(32), unique=True, index=True, nullable=True)

    genre_id = Column(Integer, ForeignKey("genre.id"), nullable=True, index=True)
    author_id = Column(Integer, ForeignKey("author.id"), nullable=True, index=True)
    publisher_id = Column(Integer, ForeignKey("publisher.id"), nullable=True, index=True)

    publish_year = Column(Integer, nullable=False, default=0)
    image = Column(LargeBinary, nullable=True)

    avg_rating = Column(Integer, nullable=False, default=0)
    total_vote_count = Column(BigInteger, nullable=False, default=0)
    total_rating = Column(BigInteger, nullable=False, default=0)
    view_count = Column(BigInteger, nullable=False, default=0)

    description = Column("descr", Text, nullable=True)

    genre = relationship("Genre")
    author = relationship("Author", back_populates="books")
    publisher = relationship("Publisher")

    __table_args__ = (
        CheckConstraint('page_count >= 1', name='book_page_count_check'),
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, name='{(self.name or '')[:30]}', isbn='{self.isbn}')>"
