from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping

from cesu_console.app.ui.table.pagination import PageState
from cesu_console.app.ui.table.sorting import SortState


@dataclass(frozen=True)
class TableState:
    """Snapshot of everything the user can change on one table."""

    query: str = ""
    sort: SortState | None = None
    page: PageState = field(default_factory=PageState)
    filters: Mapping[str, Callable[[Any], bool]] = field(default_factory=dict)
    hidden_columns: frozenset[str] = frozenset()
    selected: tuple[Any, ...] = ()

    def with_changes(self, **changes: Any) -> "TableState":
        return replace(self, **changes)


def default_state(page_size: int, hidden_columns: frozenset[str] = frozenset()) -> TableState:
    return TableState(page=PageState(index=0, size=page_size), hidden_columns=hidden_columns)
