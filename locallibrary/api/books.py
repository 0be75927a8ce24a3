import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from locallibrary.core.errors import NotFoundError
from locallibrary.core.store import CatalogStore, Identity, get_store
from locallibrary.core.templating import redirect, render
from locallibrary.models import display
from locallibrary.models.models import Book
from locallibrary.schemas.forms import BookForm, form_to_dict, validate_form
from locallibrary.services import catalog

logger = logging.getLogger("locallibrary.books")

router = APIRouter()


async def _render_invalid(request: Request, store: CatalogStore, title: str, form: BookForm, errors):
    authors, genres = await catalog.book_form_options(store)
    catalog.mark_checked(genres, form.genre)
    return render(request, "book_form.html", {
        "title": title,
        "authors": authors,
        "genres": genres,
        "book": form,
        "selected_author": form.author,
        "errors": errors,
    })


@router.get("/books", response_class=HTMLResponse)
async def book_list(request: Request, store: CatalogStore = Depends(get_store)):
    books = await catalog.book_list(store)
    return render(request, "book_list.html", {"title": "Book List", "book_list": books})


@router.get("/book/create", response_class=HTMLResponse)
async def book_create_get(request: Request, store: CatalogStore = Depends(get_store)):
    authors, genres = await catalog.book_form_options(store)
    return render(request, "book_form.html", {"title": "Create Book", "authors": authors, "genres": genres})


@router.post("/book/create")
async def book_create_post(request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(BookForm, form_to_dict(await request.form()))
    if errors:
        return await _render_invalid(request, store, "Create Book", form, errors)
    book = await store.insert(Book, form.to_document())
    logger.info(f"Created book id={book.id} title={book.title}")
    return redirect(display.book_url(book.id))


@router.get("/book/{book_id}", response_class=HTMLResponse)
async def book_detail(book_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    data = await catalog.book_detail(store, book_id)
    return render(request, "book_detail.html", {"title": data["book"].title, **data})


@router.get("/book/{book_id}/delete", response_class=HTMLResponse)
async def book_delete_get(book_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    book, instances = await catalog.book_delete_context(store, book_id)
    if book is None:
        return redirect("/catalog/books")
    return render(request, "book_delete.html", {
        "title": "Delete Book",
        "book": book,
        "bookinstance_list": instances,
        "instance_list_length": len(instances),
    })


@router.post("/book/{book_id}/delete")
async def book_delete_post(book_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    book, instances = await catalog.book_delete_context(store, book_id)
    if instances:
        # Copies still reference the book; show them instead of deleting.
        return render(request, "book_delete.html", {
            "title": "Delete Book",
            "book": book,
            "bookinstance_list": instances,
            "instance_list_length": len(instances),
        })
    if book is not None:
        await store.delete(Book, book_id)
        logger.info(f"Deleted book id={book_id}")
    return redirect("/catalog/books")


@router.get("/book/{book_id}/update", response_class=HTMLResponse)
async def book_update_get(book_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    data = await catalog.book_update_context(store, book_id)
    return render(request, "book_form.html", {
        "title": "Update Book",
        "selected_author": data["book"].author_id,
        **data,
    })


@router.post("/book/{book_id}/update")
async def book_update_post(book_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(BookForm, form_to_dict(await request.form()))
    if errors:
        return await _render_invalid(request, store, "Update Book", form, errors)
    book = await store.replace(Book, book_id, form.to_document())
    if book is None:
        raise NotFoundError("Book not found")
    logger.info(f"Updated book id={book.id}")
    return redirect(display.book_url(book.id))
