from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel

from locallibrary.core.errors import NotFoundError
from locallibrary.models import display
from locallibrary.schemas import schemas


class AuthorView(BaseModel):
    id: int
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None
    name: str
    lifespan: str
    date_of_birth_iso: str = ""
    date_of_death_iso: str = ""
    url: str

    @classmethod
    def build(cls, record: schemas.AuthorRecord) -> "AuthorView":
        return cls(
            **record.model_dump(),
            name=display.author_name(record.first_name, record.family_name),
            lifespan=display.lifespan(record.date_of_birth, record.date_of_death),
            date_of_birth_iso=display.iso_date(record.date_of_birth),
            date_of_death_iso=display.iso_date(record.date_of_death),
            url=display.author_url(record.id),
        )


class GenreView(BaseModel):
    id: int
    name: str
    url: str
    checked: bool = False

    @classmethod
    def build(cls, record: schemas.GenreRecord) -> "GenreView":
        return cls(id=record.id, name=record.name, url=display.genre_url(record.id))


class BookView(BaseModel):
    id: int
    title: str
    summary: Optional[str] = None
    isbn: Optional[str] = None
    author_id: Optional[int] = None
    genre_ids: List[int] = []
    author: Optional[AuthorView] = None
    genre: List[GenreView] = []
    url: str

    @classmethod
    def build(cls, record, author: Optional[schemas.AuthorRecord] = None, genres: Optional[List[schemas.GenreRecord]] = None) -> "BookView":
        """Build from a full ``BookRecord`` or any of its projections."""
        data = record.model_dump()
        return cls(
            **data,
            author=AuthorView.build(author) if author is not None else None,
            genre=[GenreView.build(genre) for genre in genres or []],
            url=display.book_url(record.id),
        )


class BookInstanceView(BaseModel):
    id: int
    book_id: int
    imprint: str
    status: str
    due_back: date
    due_back_formatted: str
    due_back_iso: str
    book: Optional[BookView] = None
    url: str

    @classmethod
    def build(cls, record: schemas.BookInstanceRecord, book=None) -> "BookInstanceView":
        return cls(
            **record.model_dump(),
            due_back_formatted=display.format_date(record.due_back),
            due_back_iso=display.iso_date(record.due_back),
            book=BookView.build(book) if book is not None else None,
            url=display.bookinstance_url(record.id),
        )


def join_authors(books, authors: Dict[int, schemas.AuthorRecord]) -> List[BookView]:
    """Replace each book's author reference with the referenced author.

    Raises ``NotFoundError`` when a referenced author does not exist.
    """
    return [BookView.build(book, author=_resolve(authors, book.author_id, "Author")) for book in books]


def join_books(instances, books: Dict[int, BaseModel]) -> List[BookInstanceView]:
    """Replace each copy's book reference with the referenced book.

    Raises ``NotFoundError`` when a referenced book does not exist.
    """
    return [BookInstanceView.build(instance, book=_resolve(books, instance.book_id, "Book")) for instance in instances]


def _resolve(records: Dict[int, BaseModel], record_id: int, kind: str) -> BaseModel:
    if record_id not in records:
        raise NotFoundError(f"{kind} {record_id} not found")
    return records[record_id]


def join_genres(genre_ids: List[int], genres: Dict[int, schemas.GenreRecord]) -> List[schemas.GenreRecord]:
    # Dangling references are dropped, as a populate would leave them out.
    return [genres[genre_id] for genre_id in genre_ids if genre_id in genres]
