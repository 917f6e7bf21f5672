from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1


def offset_for(page: int, limit: int) -> int:
    return (int(page) - 1) * int(limit)


def paginate(items: Sequence[T], *, page: int, limit: int) -> Page[T]:
    """Slice an already-sorted in-memory sequence."""

    start = offset_for(page, limit)
    return Page(items=list(items[start : start + limit]), total=len(items), page=page, limit=limit)
