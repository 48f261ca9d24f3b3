from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from cesu_console.app.infrastructure.logging.logger import get_logger
from cesu_console.app.ui.table.columns import Column

T = TypeVar("T")

RowPredicate = Callable[[T], bool]

logger = get_logger(__name__)


def search_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def normalize_query(query: str | None) -> str:
    return (query or "").strip()


def matches_query(record: T, column: Column[T] | None, query: str) -> bool:
    probe = normalize_query(query)
    if not probe or column is None:
        return True
    if column.filter_fn is not None:
        try:
            return bool(column.filter_fn(record, probe))
        except Exception as exc:
            logger.warning("filter_fn for column %r failed: %s", column.id, exc)
            return False
    return probe.casefold() in search_text(column.extract(record)).casefold()


def passes_filters(record: T, predicates: Mapping[str, RowPredicate]) -> bool:
    for name, predicate in predicates.items():
        try:
            if not predicate(record):
                return False
        except Exception as exc:
            logger.warning("filter %r failed: %s", name, exc)
            return False
    return True


def filter_rows(
    records: Iterable[T],
    *,
    search_column: Column[T] | None = None,
    query: str = "",
    predicates: Mapping[str, RowPredicate] | None = None,
) -> list[T]:
    active = predicates or {}
    return [
        record
        for record in records
        if matches_query(record, search_column, query) and passes_filters(record, active)
    ]
