from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Type

from dateutil.parser import isoparse
from markupsafe import escape
from pydantic import BaseModel, ValidationError, field_validator, model_validator
from pydantic_core import PydanticCustomError

from locallibrary.models.models import BOOK_INSTANCE_STATUSES, DEFAULT_STATUS, MAX_IDENTITY


# -----------------------------
# Raw form helpers
# -----------------------------
def form_to_dict(form) -> Dict[str, Any]:
    """Flatten a multi-valued form body.

    A key sent once maps to its string value, a key sent several times maps to
    the list of values in submission order.
    """
    data = {}
    for key in form.keys():
        values = form.getlist(key)
        data[key] = values[0] if len(values) == 1 else list(values)
    return data


def normalize_multi(value) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def clean(value) -> str:
    """Trim and HTML-escape a submitted value."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else ""
    return str(escape(str(value).strip()))


def _required(value: str, kind: str, message: str) -> str:
    if not value:
        raise PydanticCustomError(kind, message)
    return value


def _reference(value: str, message: str) -> str:
    if not (value.isascii() and value.isdigit()):
        raise PydanticCustomError("reference", message)
    if len(value) > len(str(MAX_IDENTITY)) or int(value) > MAX_IDENTITY:
        raise PydanticCustomError("reference", message)
    return value


def _optional_date(value, message: str) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise PydanticCustomError("date", message)
    try:
        return isoparse(value).date()
    except (ValueError, OverflowError):
        raise PydanticCustomError("date", message)


# -----------------------------
# Forms
# -----------------------------
class CatalogForm(BaseModel):
    """Base for submitted forms.

    ``sanitize`` runs before any field validation; the same output is kept
    when validation fails so the form can be rendered again. Subclasses turn
    validated input into a store document with ``to_document``.
    """

    @model_validator(mode="before")
    @classmethod
    def sanitize_input(cls, data):
        return cls.sanitize(data)

    @classmethod
    def sanitize(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {name: clean(data.get(name)) for name in cls.model_fields}


class BookForm(CatalogForm):
    title: str
    author: str
    summary: str
    isbn: str
    genre: List[str] = []

    @classmethod
    def sanitize(cls, data):
        return {
            "title": clean(data.get("title")),
            "author": clean(data.get("author")),
            "summary": clean(data.get("summary")),
            "isbn": clean(data.get("isbn")),
            "genre": [str(escape(str(item))) for item in normalize_multi(data.get("genre"))],
        }

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return _required(v, "title", "Title must not be empty.")

    @field_validator("author")
    @classmethod
    def author_required(cls, v):
        _required(v, "author", "Author must not be empty.")
        return _reference(v, "Author must be a valid reference.")

    @field_validator("summary")
    @classmethod
    def summary_required(cls, v):
        return _required(v, "summary", "Summary must not be empty.")

    @field_validator("isbn")
    @classmethod
    def isbn_required(cls, v):
        return _required(v, "isbn", "ISBN must not be empty")

    @field_validator("genre")
    @classmethod
    def genre_references(cls, v):
        for item in v:
            _reference(item, "Genre must be a valid reference.")
        return v

    def to_document(self):
        return {
            "title": self.title,
            "author_id": int(self.author),
            "summary": self.summary,
            "isbn": self.isbn,
            "genre_ids": [int(genre_id) for genre_id in self.genre],
        }


class BookInstanceForm(CatalogForm):
    book: str
    imprint: str
    status: str = DEFAULT_STATUS
    due_back: Optional[date] = None

    @classmethod
    def sanitize(cls, data):
        due_back = data.get("due_back")
        if isinstance(due_back, str):
            due_back = due_back.strip() or None
        return {
            "book": clean(data.get("book")),
            "imprint": clean(data.get("imprint")),
            "status": clean(data.get("status")) or DEFAULT_STATUS,
            "due_back": due_back,
        }

    @field_validator("book")
    @classmethod
    def book_required(cls, v):
        _required(v, "book", "Book must be specified")
        return _reference(v, "Book must be a valid reference.")

    @field_validator("imprint")
    @classmethod
    def imprint_required(cls, v):
        return _required(v, "imprint", "Imprint must be specified")

    @field_validator("status")
    @classmethod
    def status_known(cls, v):
        if v not in BOOK_INSTANCE_STATUSES:
            raise PydanticCustomError("status", "Invalid status")
        return v

    @field_validator("due_back", mode="before")
    @classmethod
    def due_back_iso8601(cls, v):
        return _optional_date(v, "Invalid date")

    def to_document(self):
        document = {
            "book_id": int(self.book),
            "imprint": self.imprint,
            "status": self.status,
        }
        # An absent due date is left to the store default.
        if self.due_back is not None:
            document["due_back"] = self.due_back
        return document


class AuthorForm(CatalogForm):
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None

    @classmethod
    def sanitize(cls, data):
        dates = {}
        for name in ("date_of_birth", "date_of_death"):
            value = data.get(name)
            if isinstance(value, str):
                value = value.strip() or None
            dates[name] = value
        return {
            "first_name": clean(data.get("first_name")),
            "family_name": clean(data.get("family_name")),
            **dates,
        }

    @field_validator("first_name")
    @classmethod
    def first_name_valid(cls, v):
        _required(v, "first_name", "First name must be specified.")
        if len(v) > 100:
            raise PydanticCustomError("first_name", "First name must not exceed 100 characters.")
        return v

    @field_validator("family_name")
    @classmethod
    def family_name_valid(cls, v):
        _required(v, "family_name", "Family name must be specified.")
        if len(v) > 100:
            raise PydanticCustomError("family_name", "Family name must not exceed 100 characters.")
        return v

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def date_of_birth_iso8601(cls, v):
        return _optional_date(v, "Invalid date of birth")

    @field_validator("date_of_death", mode="before")
    @classmethod
    def date_of_death_iso8601(cls, v):
        return _optional_date(v, "Invalid date of death")

    def to_document(self):
        return {
            "first_name": self.first_name,
            "family_name": self.family_name,
            "date_of_birth": self.date_of_birth,
            "date_of_death": self.date_of_death,
        }


class GenreForm(CatalogForm):
    name: str

    @field_validator("name")
    @classmethod
    def name_length(cls, v):
        if len(v) < 3:
            raise PydanticCustomError("name", "Genre name must contain at least 3 characters")
        if len(v) > 100:
            raise PydanticCustomError("name", "Genre name must not exceed 100 characters.")
        return v

    def to_document(self):
        return {"name": self.name}


def validate_form(form_cls: Type[CatalogForm], data: Dict[str, Any]) -> Tuple[CatalogForm, List[Dict[str, str]]]:
    """Validate submitted data against ``form_cls``.

    Returns the form and a list of ``{"param", "msg"}`` errors. When the list
    is not empty the form is unvalidated and carries the sanitized input.
    """
    try:
        return form_cls.model_validate(data), []
    except ValidationError as exc:
        form = form_cls.model_construct(**form_cls.sanitize(data))
        errors = [
            {"param": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in exc.errors()
        ]
        return form, errors
