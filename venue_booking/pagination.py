"""Page request and result types shared by stores, services and views."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from .config import MAX_PAGE_SIZE, PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number, page size and sort column/direction."""

    page: int = 0
    size: int = PAGE_SIZE
    sort_by: str = "id"
    sort_dir: str = "desc"

    @classmethod
    def of(cls, page: int | None = None, size: int | None = None,
           sort_by: str | None = None, sort_dir: str | None = None) -> "PageRequest":
        page = max(page or 0, 0)
        size = min(max(size or PAGE_SIZE, 1), MAX_PAGE_SIZE)
        sort_dir = "asc" if (sort_dir or "").lower() == "asc" else "desc"
        return cls(page=page, size=size, sort_by=sort_by or "id", sort_dir=sort_dir)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.sort_dir == "desc"


@dataclass
class Page(Generic[T]):
    items: list[T]
    request: PageRequest
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.request.size) if self.total else 0

    @property
    def has_previous(self) -> bool:
        return self.request.page > 0

    @property
    def has_next(self) -> bool:
        return self.request.page + 1 < self.total_pages
