import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from locallibrary.core.errors import NotFoundError
from locallibrary.core.store import CatalogStore, Identity, get_store
from locallibrary.core.templating import redirect, render
from locallibrary.models import display
from locallibrary.models.models import Author
from locallibrary.schemas.forms import AuthorForm, form_to_dict, validate_form
from locallibrary.services import catalog

logger = logging.getLogger("locallibrary.authors")

router = APIRouter()


@router.get("/authors", response_class=HTMLResponse)
async def author_list(request: Request, store: CatalogStore = Depends(get_store)):
    authors = await catalog.author_list(store)
    return render(request, "author_list.html", {"title": "Author List", "author_list": authors})


@router.get("/author/create", response_class=HTMLResponse)
async def author_create_get(request: Request):
    return render(request, "author_form.html", {"title": "Create Author"})


@router.post("/author/create")
async def author_create_post(request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(AuthorForm, form_to_dict(await request.form()))
    if errors:
        return render(request, "author_form.html", {"title": "Create Author", "author": form, "errors": errors})
    author = await store.insert(Author, form.to_document())
    logger.info(f"Created author id={author.id}")
    return redirect(display.author_url(author.id))


@router.get("/author/{author_id}", response_class=HTMLResponse)
async def author_detail(author_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    data = await catalog.author_detail(store, author_id)
    return render(request, "author_detail.html", {"title": "Author Detail", **data})


@router.get("/author/{author_id}/delete", response_class=HTMLResponse)
async def author_delete_get(author_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    author, books = await catalog.author_context(store, author_id)
    if author is None:
        return redirect("/catalog/authors")
    return render(request, "author_delete.html", {"title": "Delete Author", "author": author, "author_books": books})


@router.post("/author/{author_id}/delete")
async def author_delete_post(author_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    author, books = await catalog.author_context(store, author_id)
    if books:
        return render(request, "author_delete.html", {"title": "Delete Author", "author": author, "author_books": books})
    if author is not None:
        await store.delete(Author, author_id)
        logger.info(f"Deleted author id={author_id}")
    return redirect("/catalog/authors")


@router.get("/author/{author_id}/update", response_class=HTMLResponse)
async def author_update_get(author_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    author = await catalog.find_author(store, author_id)
    return render(request, "author_form.html", {"title": "Update Author", "author": author})


@router.post("/author/{author_id}/update")
async def author_update_post(author_id: Identity, request: Request, store: CatalogStore = Depends(get_store)):
    form, errors = validate_form(AuthorForm, form_to_dict(await request.form()))
    if errors:
        return render(request, "author_form.html", {"title": "Update Author", "author": form, "errors": errors})
    author = await store.replace(Author, author_id, form.to_document())
    if author is None:
        raise NotFoundError("Author not found")
    logger.info(f"Updated author id={author.id}")
    return redirect(display.author_url(author.id))
