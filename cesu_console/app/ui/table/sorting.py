from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, TypeVar

from cesu_console.app.ui.table.columns import Column

T = TypeVar("T")

ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class SortState:
    column_id: str
    direction: str = ASC

    def __post_init__(self) -> None:
        if self.direction not in (ASC, DESC):
            raise ValueError(f"sort direction must be {ASC!r} or {DESC!r}, got {self.direction!r}")

    @property
    def descending(self) -> bool:
        return self.direction == DESC


def next_sort(current: SortState | None, column_id: str) -> SortState | None:
    """Header click cycle: asc -> desc -> unsorted. Another column always restarts at asc."""
    if current is None or current.column_id != column_id:
        return SortState(column_id=column_id, direction=ASC)
    if current.direction == ASC:
        return SortState(column_id=column_id, direction=DESC)
    return None


def is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def sort_key(value: Any) -> tuple[int, Any]:
    # Group by kind first so mixed columns never compare str against int.
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float, Decimal)):
        return (0, value)
    if isinstance(value, datetime):
        return (1, value.timestamp())
    if isinstance(value, date):
        return (1, datetime.combine(value, time.min).timestamp())
    if isinstance(value, str):
        return (2, value.strip().casefold())
    return (3, str(value).casefold())


def sort_rows(records: Iterable[T], column: Column[T] | None, sort: SortState | None) -> list[T]:
    rows = list(records)
    if sort is None or column is None:
        return rows

    present: list[tuple[tuple[int, Any], T]] = []
    absent: list[T] = []
    for record in rows:
        value = column.extract(record)
        if is_absent(value):
            absent.append(record)
        else:
            present.append((sort_key(value), record))

    # list.sort stays stable with reverse=True, so ties keep input order both ways.
    present.sort(key=lambda pair: pair[0], reverse=sort.descending)
    return [record for _, record in present] + absent
