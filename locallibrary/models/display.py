"""Computed display fields for catalog records.

These are plain functions over stored values; the query layer calls them when
it builds view models.
"""
from datetime import date
from typing import Optional


def author_name(first_name: str, family_name: str) -> str:
    return f"{family_name}, {first_name}"


def format_date(value: Optional[date]) -> str:
    """Medium date format, e.g. ``Oct 8, 2026``. Empty for a missing date."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def iso_date(value: Optional[date]) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d")


def lifespan(date_of_birth: Optional[date], date_of_death: Optional[date]) -> str:
    return f"{format_date(date_of_birth)} - {format_date(date_of_death)}"


def author_url(author_id: int) -> str:
    return f"/catalog/author/{author_id}"


def genre_url(genre_id: int) -> str:
    return f"/catalog/genre/{genre_id}"


def book_url(book_id: int) -> str:
    return f"/catalog/book/{book_id}"


def bookinstance_url(bookinstance_id: int) -> str:
    return f"/catalog/bookinstance/{bookinstance_id}"
