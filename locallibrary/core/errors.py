import logging
import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from locallibrary.core.templating import render

logger = logging.getLogger("locallibrary.errors")


class NotFoundError(LookupError):
    """A record requested by identity does not exist."""

    status_code = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)
        self.message = message


def _error_page(request: Request, message: str, status_code: int, error=None):
    debug = request.app.state.settings.debug
    context = {
        "title": "Error",
        "message": message,
        "status_code": status_code,
        "error": error if debug else None,
    }
    return render(request, "error.html", context, status_code=status_code)


async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info(f"{request.method} {request.url.path} - {exc.message}")
    return _error_page(request, exc.message, exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_page(request, str(exc.detail), exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Only path identities are declared as typed parameters, so a malformed
    # one names a record that cannot exist.
    return _error_page(request, "Not Found", 404)


async def server_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    status_code = getattr(exc, "status_code", 500)
    detail = {
        "type": type(exc).__name__,
        "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    }
    return _error_page(request, str(exc) or "Internal Server Error", status_code, error=detail)


def register_error_handlers(app):
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, server_error_handler)
