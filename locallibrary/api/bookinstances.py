import logging
from datetime import date

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from locallibrary.core.errors import NotFoundError
from locallibrary.core.store import CatalogStore, Identity, get_store
from locallibrary.core.templating import redirect, render
from locallibrary.models import display
from locallibrary.models.models import BOOK_INSTANCE_STATUSES, BookInstance
from locallibrary.schemas.forms import BookInstanceForm, form_to_dict, validate_form
from locallibrary.services import catalog

logger = logging.getLogger("locallibrary.bookinstances")

router = APIRouter()


def _form_context(title: str, books, bookinstance=None, selected_book=None, errors=None):
    return {
        "title": title,
        "book_list": books,
        "bookinstance": bookinstance,
        "selected_book": selected_book,
        "statuses": BOOK_INSTANCE_STATUSES,
        "errors": errors,
    }


@router.get("/bookinstances", response_class=HTMLResponse)
async def bookinstance_list(request: Request, store: CatalogStore = Depends(get_store)):
    instances = await catalog.bookinstance_list(store)
    return render(request, "bookinstance_list.html", {"title": "Book Instance List", "bookinstance_list": instances})


@router.get("/bookinstance/create", response_class=HTMLResponse)
async def bookinstance_create_get(request: Request, store: CatalogStore = Depends(get_store)):
    books = await catalog.book_choices(store)
    return render(request, "bookinstance_form.html", _form_context("Create BookInstance", books))


@router.post("/bookinstance/create")
async def bookinstance_create_post(request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(BookInstanceForm, form_to_dict(await request.form()))
    if errors:
        books = await catalog.book_choices(store)
        context = _form_context("Create BookInstance", books, form, form.book, errors)
        return render(request, "bookinstance_form.html", context)
    instance = await store.insert(BookInstance, form.to_document())
    logger.info(f"Created book instance id={instance.id} book={instance.book_id}")
    return redirect(display.bookinstance_url(instance.id))


@router.get("/bookinstance/{bookinstance_id}", response_class=HTMLResponse)
async def bookinstance_detail(bookinstance_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    instance = await catalog.bookinstance_detail(store, bookinstance_id)
    return render(request, "bookinstance_detail.html", {"title": f"Copy: {instance.book.title}", "bookinstance": instance})


@router.get("/bookinstance/{bookinstance_id}/delete", response_class=HTMLResponse)
async def bookinstance_delete_get(bookinstance_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    instance = await catalog.find_bookinstance(store, bookinstance_id)
    if instance is None:
        return redirect("/catalog/bookinstances")
    return render(request, "bookinstance_delete.html", {"title": "Delete Book Instance", "bookinstance": instance})


@router.post("/bookinstance/{bookinstance_id}/delete")
async def bookinstance_delete_post(bookinstance_id: Identity, store: CatalogStore = Depends(get_store)):
    if await store.delete(BookInstance, bookinstance_id):
        logger.info(f"Deleted book instance id={bookinstance_id}")
    return redirect("/catalog/bookinstances")


@router.get("/bookinstance/{bookinstance_id}/update", response_class=HTMLResponse)
async def bookinstance_update_get(bookinstance_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    data = await catalog.bookinstance_update_context(store, bookinstance_id)
    context = _form_context("Update Book Instance", data["book_list"], data["bookinstance"], data["bookinstance"].book_id)
    return render(request, "bookinstance_form.html", context)


@router.post("/bookinstance/{bookinstance_id}/update")
async def bookinstance_update_post(bookinstance_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(BookInstanceForm, form_to_dict(await request.form()))
    if errors:
        books = await catalog.book_choices(store)
        context = _form_context("Update Book Instance", books, form, form.book, errors)
        return render(request, "bookinstance_form.html", context)
    document = form.to_document()
    # A replaced copy gets the same default due date as a new one.
    document.setdefault("due_back", date.today())
    instance = await store.replace(BookInstance, bookinstance_id, document)
    if instance is None:
        raise NotFoundError("Book copy not found")
    logger.info(f"Updated book instance id={instance.id}")
    return redirect(display.bookinstance_url(instance.id))
