from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from locallibrary.api import authors, bookinstances, books, genres
from locallibrary.core.store import CatalogStore, Identity, get_store
from locallibrary.core.templating import render
from locallibrary.services import catalog

router = APIRouter(prefix="/catalog")


@router.get("", response_class=HTMLResponse)
async def index(request: Request, store: CatalogStore = Depends(get_store)):
    data = await catalog.catalog_summary(store)
    return render(request, "index.html", {"title": "Local Library Home", "data": data})


router.include_router(books.router)
router.include_router(bookinstances.router)
router.include_router(authors.router)
router.include_router(genres.router)
