from datetime import date

from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship

from locallibrary.core.database import Base

BOOK_INSTANCE_STATUSES = ("Available", "Maintenance", "Loaned", "Reserved")
DEFAULT_STATUS = "Maintenance"

# Largest identity a SQLite INTEGER primary key can hold.
MAX_IDENTITY = 2**63 - 1


class Author(Base):
    __tablename__ = "authors"
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    family_name = Column(String(100), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)


class Genre(Base):
    __tablename__ = "genres"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)


class BookGenre(Base):
    __tablename__ = "book_genres"
    id = Column(Integer, primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    genre_id = Column(Integer, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)


class Book(Base):
    __tablename__ = "books"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    author_id = Column(Integer, nullable=False, index=True)
    summary = Column(Text, nullable=False)
    isbn = Column(String, nullable=False)

    # Ordered list of genre references; only ids are stored, never the genres.
    genre_links = relationship(
        "BookGenre",
        order_by="BookGenre.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def genre_ids(self):
        return [link.genre_id for link in self.genre_links]

    @genre_ids.setter
    def genre_ids(self, ids):
        self.genre_links = [BookGenre(genre_id=genre_id, position=i) for i, genre_id in enumerate(ids)]


class BookInstance(Base):
    __tablename__ = "bookinstances"
    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, nullable=False, index=True)
    imprint = Column(String, nullable=False)
    status = Column(String, nullable=False, default=DEFAULT_STATUS, index=True)
    due_back = Column(Date, nullable=False, default=date.today)
