from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageState:
    index: int = 0
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"page size must be >= 1, got {self.size}")
        if self.index < 0:
            raise ValueError(f"page index must be >= 0, got {self.index}")


@dataclass(frozen=True)
class PageSlice(Generic[T]):
    rows: tuple[T, ...]
    index: int
    size: int
    page_count: int
    total: int

    @property
    def start(self) -> int:
        return self.index * self.size

    @property
    def can_prev(self) -> bool:
        return self.index > 0

    @property
    def can_next(self) -> bool:
        return self.index < self.page_count - 1

    @property
    def label(self) -> str:
        return f"Page {self.index + 1} of {self.page_count}"


def page_count(total: int, size: int) -> int:
    return max(1, -(-total // size))


def clamp_index(index: int, total: int, size: int) -> int:
    return min(max(index, 0), page_count(total, size) - 1)


def paginate(rows: Sequence[T], page: PageState) -> PageSlice[T]:
    total = len(rows)
    index = clamp_index(page.index, total, page.size)
    start = index * page.size
    return PageSlice(
        rows=tuple(rows[start : start + page.size]),
        index=index,
        size=page.size,
        page_count=page_count(total, page.size),
        total=total,
    )


def next_page(page: PageState, total: int) -> PageState:
    return PageState(index=clamp_index(page.index + 1, total, page.size), size=page.size)


def prev_page(page: PageState, total: int) -> PageState:
    return PageState(index=clamp_index(page.index - 1, total, page.size), size=page.size)


def goto_page(page: PageState, index: int, total: int) -> PageState:
    return PageState(index=clamp_index(index, total, page.size), size=page.size)


def last_page(page: PageState, total: int) -> PageState:
    return PageState(index=page_count(total, page.size) - 1, size=page.size)


def resize(page: PageState, size: int, total: int) -> PageState:
    """Change the page size while keeping the first row of the current page on screen."""
    if size < 1:
        raise ValueError(f"page size must be >= 1, got {size}")
    first_visible = clamp_index(page.index, total, page.size) * page.size
    return PageState(index=clamp_index(first_visible // size, total, size), size=size)
