"""Template rendering helpers shared by the routers."""

from datetime import date, datetime
from urllib.parse import urlencode

from fastapi import Request
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as SchemaValidationError

from .config import TEMPLATES_DIR
from .domain.errors import ConflictError, DomainError, NotFoundError, PermissionDeniedError

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

FLASH_KEY = "_flashes"


def build_url_with_query(base_url, **kwargs):
    query = {key: value for key, value in kwargs.items() if value not in (None, "")}
    return f"{base_url}?{urlencode(query)}" if query else base_url


def format_price(value):
    return f"{value if value else 0:,.2f}"


def format_datetime(value):
    if isinstance(value, datetime):
        return value.strftime("%d.%m.%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d.%m.%Y")
    return value or ""


templates.env.filters["format_price"] = format_price
templates.env.filters["format_datetime"] = format_datetime
templates.env.globals["build_url_with_query"] = build_url_with_query


def flash(request: Request, category: str, message: str) -> None:
    request.session.setdefault(FLASH_KEY, []).append([category, message])


def pop_flashes(request: Request) -> list:
    return request.session.pop(FLASH_KEY, []) if "session" in request.scope else []


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    context = dict(context or {})
    context.setdefault("current_user", getattr(request.state, "user", None))
    context["flashes"] = pop_flashes(request)
    return templates.TemplateResponse(request, name, context, status_code=status_code)


STATUS_CODES = {
    NotFoundError: 404,
    ConflictError: 409,
    PermissionDeniedError: 403,
}


def status_for(exc: Exception) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


def error_message(exc: Exception) -> str:
    if isinstance(exc, DomainError):
        return exc.message
    if isinstance(exc, SchemaValidationError):
        parts = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            parts.append(f"{field}: {error['msg']}" if field else error["msg"])
        return "; ".join(parts)
    return str(exc)
