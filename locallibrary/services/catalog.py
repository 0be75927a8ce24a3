"""Read side of the catalog.

Each function gathers everything one page needs. Reads that do not depend on
each other are issued together with ``asyncio.gather``; a failing read fails
the whole page. References are joined explicitly after the reads that produce
them.
"""
import asyncio
from typing import Dict, List, Optional, Tuple

from locallibrary.core.errors import NotFoundError
from locallibrary.core.store import CatalogStore
from locallibrary.models.models import Author, Book, BookInstance, Genre
from locallibrary.schemas import schemas
from locallibrary.schemas.views import (
    AuthorView, BookInstanceView, BookView, GenreView, join_authors, join_books, join_genres,
)
from locallibrary.utils.sort import sort_authors, sort_books, sort_genres


# -----------------------------
# Home
# -----------------------------
async def catalog_summary(store: CatalogStore) -> Dict[str, int]:
    counts = await asyncio.gather(
        store.count(Book),
        store.count(BookInstance),
        store.count(BookInstance, status="Available"),
        store.count(Author),
        store.count(Genre),
    )
    keys = ("book_count", "book_instance_count", "book_instance_available_count", "author_count", "genre_count")
    return dict(zip(keys, counts))


# -----------------------------
# Books
# -----------------------------
async def populate_book(store: CatalogStore, book: schemas.BookRecord) -> BookView:
    author, genres = await asyncio.gather(
        store.find_by_id(Author, book.author_id),
        store.find_by_ids(Genre, book.genre_ids),
    )
    return BookView.build(book, author=author, genres=join_genres(book.genre_ids, genres))


async def find_book(store: CatalogStore, book_id: int) -> Optional[BookView]:
    book = await store.find_by_id(Book, book_id)
    if book is None:
        return None
    return await populate_book(store, book)


async def book_list(store: CatalogStore) -> List[BookView]:
    books = await store.find(Book, projection=schemas.BookListing)
    authors = await store.find_by_ids(Author, [book.author_id for book in books])
    return sort_books(join_authors(books, authors))


async def book_detail(store: CatalogStore, book_id: int) -> dict:
    book, instances = await asyncio.gather(
        find_book(store, book_id),
        store.find(BookInstance, book_id=book_id),
    )
    if book is None:
        raise NotFoundError("Book not found")
    return {
        "book": book,
        "genre_count": len(book.genre),
        "book_instances": [BookInstanceView.build(instance) for instance in instances],
    }


async def book_form_options(store: CatalogStore) -> Tuple[List[AuthorView], List[GenreView]]:
    authors, genres = await asyncio.gather(store.find(Author), store.find(Genre))
    return (
        sort_authors([AuthorView.build(author) for author in authors]),
        [GenreView.build(genre) for genre in genres],
    )


async def book_update_context(store: CatalogStore, book_id: int) -> dict:
    book, (authors, genres) = await asyncio.gather(
        find_book(store, book_id),
        book_form_options(store),
    )
    if book is None:
        raise NotFoundError("Book not found")
    mark_checked(genres, book.genre_ids)
    return {"book": book, "authors": authors, "genres": genres}


async def book_delete_context(store: CatalogStore, book_id: int) -> Tuple[Optional[BookView], List[BookInstanceView]]:
    book, instances = await asyncio.gather(
        store.find_by_id(Book, book_id),
        store.find(BookInstance, book_id=book_id),
    )
    book_view = BookView.build(book) if book is not None else None
    return book_view, [BookInstanceView.build(instance) for instance in instances]


def mark_checked(genres: List[GenreView], selected) -> List[GenreView]:
    """Flag every genre whose identity is among ``selected`` (ids or strings)."""
    wanted = {str(genre_id) for genre_id in selected}
    for genre in genres:
        if str(genre.id) in wanted:
            genre.checked = True
    return genres


# -----------------------------
# Book instances
# -----------------------------
async def bookinstance_list(store: CatalogStore) -> List[BookInstanceView]:
    instances = await store.find(BookInstance)
    books = await store.find_by_ids(Book, [instance.book_id for instance in instances], projection=schemas.BookTitle)
    return join_books(instances, books)


async def find_bookinstance(store: CatalogStore, bookinstance_id: int) -> Optional[BookInstanceView]:
    instance = await store.find_by_id(BookInstance, bookinstance_id)
    if instance is None:
        return None
    book = await store.find_by_id(Book, instance.book_id)
    return BookInstanceView.build(instance, book=book)


async def bookinstance_detail(store: CatalogStore, bookinstance_id: int) -> BookInstanceView:
    instance = await find_bookinstance(store, bookinstance_id)
    if instance is None:
        raise NotFoundError("Book copy not found")
    if instance.book is None:
        raise NotFoundError(f"Book {instance.book_id} not found")
    return instance


async def book_choices(store: CatalogStore) -> List[BookView]:
    books = await store.find(Book, projection=schemas.BookTitle)
    return sort_books([BookView.build(book) for book in books])


async def bookinstance_update_context(store: CatalogStore, bookinstance_id: int) -> dict:
    instance, books = await asyncio.gather(
        store.find_by_id(BookInstance, bookinstance_id),
        book_choices(store),
    )
    if instance is None:
        raise NotFoundError("Book copy not found")
    return {"bookinstance": BookInstanceView.build(instance), "book_list": books}


# -----------------------------
# Authors
# -----------------------------
async def author_list(store: CatalogStore) -> List[AuthorView]:
    authors = await store.find(Author)
    return sort_authors([AuthorView.build(author) for author in authors])


async def author_context(store: CatalogStore, author_id: int) -> Tuple[Optional[AuthorView], List[BookView]]:
    author, books = await asyncio.gather(
        store.find_by_id(Author, author_id),
        store.find(Book, projection=schemas.BookSummary, author_id=author_id),
    )
    author_view = AuthorView.build(author) if author is not None else None
    return author_view, [BookView.build(book) for book in books]


async def author_detail(store: CatalogStore, author_id: int) -> dict:
    author, books = await author_context(store, author_id)
    if author is None:
        raise NotFoundError("Author not found")
    return {"author": author, "author_books": books}


async def find_author(store: CatalogStore, author_id: int) -> AuthorView:
    author = await store.find_by_id(Author, author_id)
    if author is None:
        raise NotFoundError("Author not found")
    return AuthorView.build(author)


# -----------------------------
# Genres
# -----------------------------
async def genre_list(store: CatalogStore) -> List[GenreView]:
    genres = await store.find(Genre)
    return sort_genres([GenreView.build(genre) for genre in genres])


async def genre_context(store: CatalogStore, genre_id: int) -> Tuple[Optional[GenreView], List[BookView]]:
    genre, books = await asyncio.gather(
        store.find_by_id(Genre, genre_id),
        store.find_books_in_genre(genre_id, projection=schemas.BookSummary),
    )
    genre_view = GenreView.build(genre) if genre is not None else None
    return genre_view, [BookView.build(book) for book in books]


async def genre_detail(store: CatalogStore, genre_id: int) -> dict:
    genre, books = await genre_context(store, genre_id)
    if genre is None:
        raise NotFoundError("Genre not found")
    return {"genre": genre, "genre_books": books}


async def find_genre(store: CatalogStore, genre_id: int) -> GenreView:
    genre = await store.find_by_id(Genre, genre_id)
    if genre is None:
        raise NotFoundError("Genre not found")
    return GenreView.build(genre)


async def find_genre_by_name(store: CatalogStore, name: str) -> Optional[GenreView]:
    matches = await store.find(Genre, name=name)
    return GenreView.build(matches[0]) if matches else None
