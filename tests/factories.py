import asyncio
from datetime import date

from locallibrary.models.models import Author, Book, BookInstance, Genre


def run(coro):
    return asyncio.run(coro)


def seed_catalog(store):
    async def seed():
        herbert = await store.insert(Author, {"first_name": "Frank", "family_name": "Herbert", "date_of_birth": date(1920, 10, 8)})
        austen = await store.insert(Author, {"first_name": "Jane", "family_name": "austen"})
        scifi = await store.insert(Genre, {"name": "Science Fiction"})
        romance = await store.insert(Genre, {"name": "Romance"})
        dune = await store.insert(Book, {
            "title": "Dune", "author_id": herbert.id, "summary": "Desert planet",
            "isbn": "9780441013593", "genre_ids": [scifi.id],
        })
        emma = await store.insert(Book, {
            "title": "emma", "author_id": austen.id, "summary": "Matchmaking",
            "isbn": "9780141439587", "genre_ids": [romance.id],
        })
        messiah = await store.insert(Book, {
            "title": "Dune Messiah", "author_id": herbert.id, "summary": "Sequel",
            "isbn": "9780593098233", "genre_ids": [],
        })
        copies = [
            await store.insert(BookInstance, {"book_id": dune.id, "imprint": "Ace, 1990", "status": "Available"}),
            await store.insert(BookInstance, {"book_id": dune.id, "imprint": "Ace, 2005", "status": "Loaned", "due_back": date(2026, 11, 1)}),
            await store.insert(BookInstance, {"book_id": emma.id, "imprint": "Penguin, 2003", "status": "Available"}),
        ]
        return {
            "authors": {"herbert": herbert, "austen": austen},
            "genres": {"scifi": scifi, "romance": romance},
            "books": {"dune": dune, "emma": emma, "messiah": messiah},
            "copies": copies,
        }
    return run(seed())
