from pathlib import Path

from fastapi import Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from jinja2 import Undefined

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


# -----------------------------
# Template helpers
# -----------------------------
def if_equals(a, b) -> bool:
    return a == b and type(a) is type(b)


def if_equals_string(a, b) -> bool:
    if a is None or b is None or isinstance(a, Undefined) or isinstance(b, Undefined):
        return False
    return str(a) == str(b)


def else_compare(a, b) -> bool:
    return not if_equals(a, b)


def if_lower(a, b) -> bool:
    """True while ``a`` is not the last index of a sequence of length ``b``."""
    return a < b - 1


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    if_equals=if_equals,
    if_equals_string=if_equals_string,
    else_compare=else_compare,
    if_lower=if_lower,
)


def render(request: Request, name: str, context: dict, status_code: int = 200):
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def redirect(url: str):
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)
