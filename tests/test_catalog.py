import pytest

from locallibrary.core.errors import NotFoundError
from locallibrary.models.models import Book, BookInstance, Genre
from locallibrary.services import catalog

from factories import run, seed_catalog


def test_catalog_summary(store):
    seed_catalog(store)
    assert run(catalog.catalog_summary(store)) == {
        "book_count": 3,
        "book_instance_count": 3,
        "book_instance_available_count": 2,
        "author_count": 2,
        "genre_count": 2,
    }


def test_catalog_summary_fails_as_a_whole(store, monkeypatch):
    async def broken_count(model, **filters):
        if model is BookInstance and filters:
            raise RuntimeError("count failed")
        return 0

    monkeypatch.setattr(store, "count", broken_count)
    with pytest.raises(RuntimeError, match="count failed"):
        run(catalog.catalog_summary(store))


def test_book_list_sorted_with_authors(store):
    seed_catalog(store)
    books = run(catalog.book_list(store))
    assert [book.title for book in books] == ["Dune", "Dune Messiah", "emma"]
    assert books[0].author.name == "Herbert, Frank"
    assert books[2].author.name == "austen, Jane"
    assert books[0].url == f"/catalog/book/{books[0].id}"


def test_book_list_missing_author_is_not_found(store):
    run(store.insert(Book, {"title": "Orphan", "author_id": 42, "summary": "s", "isbn": "i"}))
    with pytest.raises(NotFoundError, match="Author 42 not found"):
        run(catalog.book_list(store))


def test_book_list_empty(store):
    assert run(catalog.book_list(store)) == []


def test_book_detail(store):
    data = seed_catalog(store)
    dune = data["books"]["dune"]
    detail = run(catalog.book_detail(store, dune.id))
    assert detail["book"].title == "Dune"
    assert detail["book"].author.lifespan == "Oct 8, 1920 - "
    assert [genre.name for genre in detail["book"].genre] == ["Science Fiction"]
    assert detail["genre_count"] == 1
    assert [copy.imprint for copy in detail["book_instances"]] == ["Ace, 1990", "Ace, 2005"]


def test_book_detail_without_copies(store):
    data = seed_catalog(store)
    detail = run(catalog.book_detail(store, data["books"]["messiah"].id))
    assert detail["book_instances"] == []
    assert detail["genre_count"] == 0


def test_book_detail_not_found(store):
    with pytest.raises(NotFoundError, match="Book not found"):
        run(catalog.book_detail(store, 9999))


def test_book_form_options(store):
    data = seed_catalog(store)
    authors, genres = run(catalog.book_form_options(store))
    assert [author.family_name for author in authors] == ["austen", "Herbert"]
    assert {genre.id for genre in genres} == {genre.id for genre in data["genres"].values()}
    assert not any(genre.checked for genre in genres)


def test_book_update_context_marks_genres(store):
    data = seed_catalog(store)
    context = run(catalog.book_update_context(store, data["books"]["dune"].id))
    checked = [genre.name for genre in context["genres"] if genre.checked]
    assert checked == ["Science Fiction"]
    with pytest.raises(NotFoundError):
        run(catalog.book_update_context(store, 9999))


def test_mark_checked_accepts_strings():
    from locallibrary.schemas.views import GenreView

    genres = [GenreView(id=1, name="A", url="/a"), GenreView(id=2, name="B", url="/b")]
    catalog.mark_checked(genres, ["2"])
    assert [genre.checked for genre in genres] == [False, True]


def test_book_delete_context(store):
    data = seed_catalog(store)
    book, copies = run(catalog.book_delete_context(store, data["books"]["dune"].id))
    assert book.title == "Dune"
    assert len(copies) == 2
    book, copies = run(catalog.book_delete_context(store, 9999))
    assert book is None and copies == []


def test_bookinstance_list_unsorted_with_books(store):
    data = seed_catalog(store)
    copies = run(catalog.bookinstance_list(store))
    assert [copy.book.title for copy in copies] == ["Dune", "Dune", "emma"]
    assert copies[1].due_back_formatted == "Nov 1, 2026"
    assert copies[0].url == f"/catalog/bookinstance/{data['copies'][0].id}"


def test_bookinstance_detail(store):
    data = seed_catalog(store)
    copy = run(catalog.bookinstance_detail(store, data["copies"][2].id))
    assert copy.book.title == "emma"
    assert copy.status == "Available"
    with pytest.raises(NotFoundError, match="Book copy not found"):
        run(catalog.bookinstance_detail(store, 9999))


def test_bookinstance_with_missing_book_is_not_found(store):
    copy = run(store.insert(BookInstance, {"book_id": 4242, "imprint": "Lost, 1999"}))
    with pytest.raises(NotFoundError, match="Book 4242 not found"):
        run(catalog.bookinstance_detail(store, copy.id))
    with pytest.raises(NotFoundError, match="Book 4242 not found"):
        run(catalog.bookinstance_list(store))


def test_book_choices_sorted(store):
    seed_catalog(store)
    assert [book.title for book in run(catalog.book_choices(store))] == ["Dune", "Dune Messiah", "emma"]


def test_bookinstance_update_context(store):
    data = seed_catalog(store)
    context = run(catalog.bookinstance_update_context(store, data["copies"][1].id))
    assert context["bookinstance"].due_back_iso == "2026-11-01"
    assert len(context["book_list"]) == 3
    with pytest.raises(NotFoundError):
        run(catalog.bookinstance_update_context(store, 9999))


def test_author_and_genre_pages(store):
    data = seed_catalog(store)
    assert [a.name for a in run(catalog.author_list(store))] == ["austen, Jane", "Herbert, Frank"]
    detail = run(catalog.author_detail(store, data["authors"]["herbert"].id))
    assert [book.title for book in detail["author_books"]] == ["Dune", "Dune Messiah"]
    assert [g.name for g in run(catalog.genre_list(store))] == ["Romance", "Science Fiction"]
    detail = run(catalog.genre_detail(store, data["genres"]["romance"].id))
    assert [book.title for book in detail["genre_books"]] == ["emma"]
    with pytest.raises(NotFoundError, match="Author not found"):
        run(catalog.author_detail(store, 9999))
    with pytest.raises(NotFoundError, match="Genre not found"):
        run(catalog.genre_detail(store, 9999))


def test_book_detail_fails_when_copy_read_fails(store, monkeypatch):
    data = seed_catalog(store)
    find = store.find

    async def broken_find(model, projection=None, **filters):
        if model is BookInstance:
            raise RuntimeError("copies unavailable")
        return await find(model, projection=projection, **filters)

    monkeypatch.setattr(store, "find", broken_find)
    with pytest.raises(RuntimeError, match="copies unavailable"):
        run(catalog.book_detail(store, data["books"]["dune"].id))


def test_book_detail_fails_when_genre_read_fails(store, monkeypatch):
    data = seed_catalog(store)

    async def broken_find_by_ids(model, ids, projection=None):
        raise RuntimeError("genres unavailable")

    monkeypatch.setattr(store, "find_by_ids", broken_find_by_ids)
    with pytest.raises(RuntimeError, match="genres unavailable"):
        run(catalog.book_detail(store, data["books"]["dune"].id))


def test_book_delete_context_fails_when_book_read_fails(store, monkeypatch):
    data = seed_catalog(store)

    async def broken_find_by_id(model, record_id, projection=None):
        raise RuntimeError("book unavailable")

    monkeypatch.setattr(store, "find_by_id", broken_find_by_id)
    with pytest.raises(RuntimeError, match="book unavailable"):
        run(catalog.book_delete_context(store, data["books"]["dune"].id))


def test_book_form_options_fail_when_genre_read_fails(store, monkeypatch):
    seed_catalog(store)
    find = store.find

    async def broken_find(model, projection=None, **filters):
        if model is Genre:
            raise RuntimeError("genres unavailable")
        return await find(model, projection=projection, **filters)

    monkeypatch.setattr(store, "find", broken_find)
    with pytest.raises(RuntimeError, match="genres unavailable"):
        run(catalog.book_form_options(store))
