from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from cesu_console.app.ui.table.columns import ColumnSet
from cesu_console.app.ui.table.matcher import filter_rows
from cesu_console.app.ui.table.pagination import paginate
from cesu_console.app.ui.table.selection import IdentityFn, SelectablePredicate, always_selectable, default_identity
from cesu_console.app.ui.table.sorting import SortState, sort_rows
from cesu_console.app.ui.table.state import TableState
from cesu_console.app.ui.view_state import TableStatus, resolve_table_status

T = TypeVar("T")


@dataclass(frozen=True)
class HeaderCell:
    column_id: str
    label: Any
    sortable: bool
    sort_direction: str | None = None


@dataclass(frozen=True)
class RenderedRow(Generic[T]):
    identity: Any
    record: T
    cells: dict[str, Any]
    selectable: bool
    selected: bool


@dataclass(frozen=True)
class TableView(Generic[T]):
    status: TableStatus
    message: str
    headers: tuple[HeaderCell, ...]
    rows: tuple[RenderedRow[T], ...]
    matched: tuple[T, ...]
    query: str
    sort: SortState | None
    page_index: int
    page_size: int
    page_count: int
    total_rows: int
    can_prev: bool
    can_next: bool
    selected_count: int
    selected_total: int
    all_page_selected: bool
    some_page_selected: bool
    search_placeholder: str | None = None
    page_size_options: tuple[int, ...] = ()
    filter_bar: Any = None
    action_bar: Any = None
    active_filters: tuple[str, ...] = field(default=())

    @property
    def filtered_rows(self) -> int:
        return len(self.matched)

    @property
    def page_label(self) -> str:
        return f"Page {self.page_index + 1} of {self.page_count}"

    @property
    def selection_label(self) -> str:
        return f"{self.selected_count} of {self.filtered_rows} row(s) selected."

    @property
    def visible_records(self) -> list[T]:
        return [row.record for row in self.rows]


def build_view(
    records: Sequence[T],
    columns: ColumnSet[T],
    state: TableState,
    *,
    identity: IdentityFn = default_identity,
    selectable: SelectablePredicate = always_selectable,
    loading: bool = False,
    search_placeholder: str | None = None,
    page_size_options: Sequence[int] = (),
) -> TableView[T]:
    """Project records and table state into the visible page. Same inputs, same view."""
    sort_column = columns.get(state.sort.column_id) if state.sort is not None else None
    matched = filter_rows(
        records,
        search_column=columns.search_column,
        query=state.query,
        predicates=state.filters,
    )
    ordered = sort_rows(matched, sort_column, state.sort)
    page = paginate(ordered, state.page)

    visible_columns = columns.visible(state.hidden_columns)
    headers = tuple(
        HeaderCell(
            column_id=column.id,
            label=column.render_header(_direction_for(state.sort, column.id)),
            sortable=column.sortable,
            sort_direction=_direction_for(state.sort, column.id),
        )
        for column in visible_columns
    )

    selected_ids = set(state.selected)
    rows = []
    for record in page.rows:
        key = identity(record)
        can_select = _safe_selectable(selectable, record)
        rows.append(
            RenderedRow(
                identity=key,
                record=record,
                cells={column.id: column.render_cell(record) for column in visible_columns},
                selectable=can_select,
                selected=key in selected_ids,
            )
        )

    candidates = [row for row in rows if row.selectable]
    view_state = resolve_table_status(loading=loading, total_rows=len(records), filtered_rows=len(ordered))
    return TableView(
        status=view_state.status,
        message=view_state.message,
        headers=headers,
        rows=tuple(rows),
        matched=tuple(ordered),
        query=state.query,
        sort=state.sort,
        page_index=page.index,
        page_size=page.size,
        page_count=page.page_count,
        total_rows=len(records),
        can_prev=page.can_prev,
        can_next=page.can_next,
        selected_count=sum(1 for record in ordered if identity(record) in selected_ids),
        selected_total=len(selected_ids),
        all_page_selected=bool(candidates) and all(row.selected for row in candidates),
        some_page_selected=any(row.selected for row in rows),
        search_placeholder=search_placeholder,
        page_size_options=tuple(page_size_options),
        active_filters=tuple(state.filters),
    )


def _direction_for(sort: SortState | None, column_id: str) -> str | None:
    if sort is None or sort.column_id != column_id:
        return None
    return sort.direction


def _safe_selectable(selectable: SelectablePredicate, record: Any) -> bool:
    try:
        return bool(selectable(record))
    except Exception:
        return False
