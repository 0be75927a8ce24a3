from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int


class AuthorRecord(Record):
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None


class GenreRecord(Record):
    name: str


class BookRecord(Record):
    title: str
    author_id: int
    summary: str
    isbn: str
    genre_ids: List[int] = []


class BookInstanceRecord(Record):
    book_id: int
    imprint: str
    status: str
    due_back: date


# Projections: only the named columns are read from the store.
class BookListing(Record):
    title: str
    author_id: int


class BookTitle(Record):
    title: str


class BookSummary(Record):
    title: str
    summary: str
