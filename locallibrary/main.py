import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from locallibrary.api import routes
from locallibrary.core.config import Settings, settings as default_settings
from locallibrary.core.errors import register_error_handlers
from locallibrary.core.log import configure_logging
from locallibrary.core.store import CatalogStore
from locallibrary.core.templating import redirect

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or default_settings
    logger = configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = CatalogStore(settings.database_url, echo=settings.echo_sql)
        store.open()
        app.state.store = store
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        logging.getLogger("locallibrary.http").info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed:.1f} ms"
        )
        return response

    register_error_handlers(app)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(routes.router)

    @app.get("/", include_in_schema=False)
    def home():
        return redirect("/catalog")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info(f"{settings.app_name} ready ({settings.environment})")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("locallibrary.main:app", host=default_settings.api_host, port=default_settings.api_port)
