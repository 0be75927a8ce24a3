import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from locallibrary.core.errors import NotFoundError
from locallibrary.core.store import CatalogStore, Identity, get_store
from locallibrary.core.templating import redirect, render
from locallibrary.models import display
from locallibrary.models.models import Genre
from locallibrary.schemas.forms import GenreForm, form_to_dict, validate_form
from locallibrary.services import catalog

logger = logging.getLogger("locallibrary.genres")

router = APIRouter()


@router.get("/genres", response_class=HTMLResponse)
async def genre_list(request: Request, store: CatalogStore = Depends(get_store)):
    genres = await catalog.genre_list(store)
    return render(request, "genre_list.html", {"title": "Genre List", "genre_list": genres})


@router.get("/genre/create", response_class=HTMLResponse)
async def genre_create_get(request: Request):
    return render(request, "genre_form.html", {"title": "Create Genre"})


@router.post("/genre/create")
async def genre_create_post(request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(GenreForm, form_to_dict(await request.form()))
    if errors:
        return render(request, "genre_form.html", {"title": "Create Genre", "genre": form, "errors": errors})
    existing = await catalog.find_genre_by_name(store, form.name)
    if existing is not None:
        return redirect(existing.url)
    genre = await store.insert(Genre, form.to_document())
    logger.info(f"Created genre id={genre.id} name={genre.name}")
    return redirect(display.genre_url(genre.id))


@router.get("/genre/{genre_id}", response_class=HTMLResponse)
async def genre_detail(genre_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    data = await catalog.genre_detail(store, genre_id)
    return render(request, "genre_detail.html", {"title": "Genre Detail", **data})


@router.get("/genre/{genre_id}/delete", response_class=HTMLResponse)
async def genre_delete_get(genre_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    genre, books = await catalog.genre_context(store, genre_id)
    if genre is None:
        return redirect("/catalog/genres")
    return render(request, "genre_delete.html", {"title": "Delete Genre", "genre": genre, "genre_books": books})


@router.post("/genre/{genre_id}/delete")
async def genre_delete_post(genre_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    genre, books = await catalog.genre_context(store, genre_id)
    if books:
        return render(request, "genre_delete.html", {"title": "Delete Genre", "genre": genre, "genre_books": books})
    if genre is not None:
        await store.delete(Genre, genre_id)
        logger.info(f"Deleted genre id={genre_id}")
    return redirect("/catalog/genres")


@router.get("/genre/{genre_id}/update", response_class=HTMLResponse)
async def genre_update_get(genre_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    genre = await catalog.find_genre(store, genre_id)
    return render(request, "genre_form.html", {"title": "Update Genre", "genre": genre})


@router.post("/genre/{genre_id}/update")
async def genre_update_post(genre_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(GenreForm, form_to_dict(await request.form()))
    if errors:
        return render(request, "genre_form.html", {"title": "Update Genre", "genre": form, "errors": errors})
    genre = await store.replace(Genre, genre_id, form.to_document())
    if genre is None:
        raise NotFoundError("Genre not found")
    logger.info(f"Updated genre id={genre.id}")
    return redirect(display.genre_url(genre.id))
