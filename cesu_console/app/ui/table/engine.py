from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import replace
from typing import Any, Generic, TypeVar

from cesu_console.app.config import TableSettings
from cesu_console.app.infrastructure.logging.logger import get_logger, log_action
from cesu_console.app.ui.table.columns import Column, ColumnSet
from cesu_console.app.ui.table.errors import TableConfigError, UnknownColumnError
from cesu_console.app.ui.table.matcher import RowPredicate, filter_rows, normalize_query
from cesu_console.app.ui.table.pagination import PageState, clamp_index, goto_page, last_page, next_page, prev_page, resize
from cesu_console.app.ui.table.render import TableView, build_view
from cesu_console.app.ui.table.selection import (
    IdentityFn,
    SelectablePredicate,
    SelectionManager,
    always_selectable,
    default_identity,
    index_records,
)
from cesu_console.app.ui.table.slots import Slot, SlotHandle, render_slot
from cesu_console.app.ui.table.sorting import SortState, next_sort
from cesu_console.app.ui.table.state import TableState, default_state

T = TypeVar("T")

logger = get_logger(__name__)


class DataTable(Generic[T]):
    """Searchable, sortable, paginated, selectable grid over records already in memory.

    The table never mutates the caller's records and never talks to the network.
    Every mutation updates the state; ``render()`` recomputes the whole view.
    """

    def __init__(
        self,
        records: Iterable[T],
        columns: Sequence[Column[T]],
        *,
        search_key: str | None = None,
        search_placeholder: str | None = None,
        filter_slot: Slot | None = None,
        action_slot: Slot | None = None,
        identity: IdentityFn = default_identity,
        selectable: SelectablePredicate = always_selectable,
        settings: TableSettings | None = None,
        page_size: int | None = None,
        source_key: Hashable | None = None,
        on_remove: Callable[[Any], None] | None = None,
        table_id: str = "table",
    ) -> None:
        self.table_id = table_id
        self.settings = settings or TableSettings()
        try:
            self.columns: ColumnSet[T] = ColumnSet(columns, search_key=search_key)
        except TableConfigError as exc:
            log_action(logger, table_id, "configure", "error", level=logging.ERROR, error=str(exc))
            raise
        self.search_placeholder = search_placeholder
        self.filter_slot = filter_slot
        self.action_slot = action_slot
        self._identity = identity
        self._selectable = selectable
        self._on_remove = on_remove
        self._default_page_size = page_size or self.settings.page_size
        if self._default_page_size < 1:
            raise TableConfigError(f"page_size must be >= 1, got {self._default_page_size}")

        self._source_key = source_key
        self._records: tuple[T, ...] = ()
        self._index: dict[Any, T] = {}
        self._selection: SelectionManager[T] = SelectionManager(selectable=selectable)
        self._state = default_state(self._default_page_size, self.columns.initially_hidden())
        self.loading = False
        self._load(records)

    # -- dataset -----------------------------------------------------------

    @property
    def records(self) -> tuple[T, ...]:
        return self._records

    def set_records(self, records: Iterable[T], *, source_key: Hashable | None = None) -> None:
        """Adopt a fresh dataset. A different source key means a different list, so state starts over."""
        if source_key is not None and source_key != self._source_key:
            self._source_key = source_key
            self.reset()
        self._load(records)
        log_action(logger, self.table_id, "records", "ok", level=logging.DEBUG, total=len(self._records))

    def remove_record(self, identity: Any) -> bool:
        if identity not in self._index:
            return False
        self._load(record for record in self._records if self._identity(record) != identity)
        log_action(logger, self.table_id, "remove", "ok", identity=identity, total=len(self._records))
        if self._on_remove is not None:
            self._on_remove(identity)
        return True

    def _load(self, records: Iterable[T]) -> None:
        snapshot = tuple(records)
        self._index = index_records(snapshot, self._identity)
        self._records = snapshot
        dropped = self._selection.sync(self._index)
        if dropped:
            log_action(logger, self.table_id, "selection", "pruned", level=logging.DEBUG, dropped=list(dropped))
        self._clamp_page()

    def reset(self) -> None:
        self._selection.clear()
        self._state = default_state(self._default_page_size, self.columns.initially_hidden())

    # -- search & filters --------------------------------------------------

    @property
    def state(self) -> TableState:
        return self._state.with_changes(selected=self._selection.selected_ids)

    def set_query(self, query: str) -> None:
        self._update(query=normalize_query(query), page=PageState(index=0, size=self._state.page.size))
        log_action(logger, self.table_id, "query", "ok", level=logging.DEBUG, query=self._state.query)

    def set_filter(self, name: str, predicate: RowPredicate) -> None:
        filters = dict(self._state.filters)
        filters[name] = predicate
        self._update(filters=filters, page=PageState(index=0, size=self._state.page.size))
        log_action(logger, self.table_id, "filter", "set", level=logging.DEBUG, name=name)

    def clear_filter(self, name: str) -> None:
        if name not in self._state.filters:
            return
        filters = {key: value for key, value in self._state.filters.items() if key != name}
        self._update(filters=filters, page=PageState(index=0, size=self._state.page.size))
        log_action(logger, self.table_id, "filter", "cleared", level=logging.DEBUG, name=name)

    def clear_filters(self) -> None:
        if not self._state.filters:
            return
        self._update(filters={}, page=PageState(index=0, size=self._state.page.size))
        log_action(logger, self.table_id, "filter", "cleared_all", level=logging.DEBUG)

    # -- sorting -------------------------------------------------------------

    def toggle_sort(self, column_id: str) -> SortState | None:
        column = self.columns.get(column_id)
        if not column.sortable:
            log_action(logger, self.table_id, "sort", "ignored", level=logging.DEBUG, column_id=column_id)
            return self._state.sort
        self._apply_sort(next_sort(self._state.sort, column_id))
        return self._state.sort

    def set_sort(self, column_id: str | None, direction: str = "asc") -> None:
        if column_id is None:
            self._apply_sort(None)
            return
        column = self.columns.get(column_id)
        if not column.sortable:
            raise TableConfigError(f"Column {column_id!r} is not sortable")
        self._apply_sort(SortState(column_id=column_id, direction=direction))

    def _apply_sort(self, sort: SortState | None) -> None:
        self._update(sort=sort, page=PageState(index=0, size=self._state.page.size))
        log_action(
            logger,
            self.table_id,
            "sort",
            "ok",
            level=logging.DEBUG,
            column_id=sort.column_id if sort else None,
            direction=sort.direction if sort else None,
        )

    # -- pagination ----------------------------------------------------------

    def next_page(self) -> None:
        self._set_page(next_page(self._state.page, self._filtered_count()))

    def prev_page(self) -> None:
        self._set_page(prev_page(self._state.page, self._filtered_count()))

    def first_page(self) -> None:
        self._set_page(PageState(index=0, size=self._state.page.size))

    def last_page(self) -> None:
        self._set_page(last_page(self._state.page, self._filtered_count()))

    def goto_page(self, index: int) -> None:
        self._set_page(goto_page(self._state.page, index, self._filtered_count()))

    def set_page_size(self, size: int) -> None:
        if size not in self.settings.page_size_options:
            log_action(logger, self.table_id, "page_size", "unlisted", level=logging.DEBUG, size=size)
        self._set_page(resize(self._state.page, size, self._filtered_count()))

    def _set_page(self, page: PageState) -> None:
        self._update(page=page)
        log_action(logger, self.table_id, "page", "ok", level=logging.DEBUG, index=page.index, size=page.size)

    def _filtered_count(self) -> int:
        return len(
            filter_rows(
                self._records,
                search_column=self.columns.search_column,
                query=self._state.query,
                predicates=self._state.filters,
            )
        )

    def _clamp_page(self) -> None:
        page = self._state.page
        index = clamp_index(page.index, self._filtered_count(), page.size)
        if index != page.index:
            self._state = self._state.with_changes(page=PageState(index=index, size=page.size))

    # -- selection -----------------------------------------------------------

    @property
    def selected_ids(self) -> tuple[Any, ...]:
        return self._selection.selected_ids

    def selected_records(self) -> list[T]:
        return self._selection.selected_records()

    def is_selected(self, identity: Any) -> bool:
        return self._selection.is_selected(identity)

    def toggle_selected(self, identity: Any) -> bool:
        changed = self._selection.toggle(identity)
        log_action(logger, self.table_id, "selection", "toggled" if changed else "ignored", level=logging.DEBUG, identity=identity)
        return changed

    def set_selected(self, identity: Any, selected: bool) -> bool:
        return self._selection.set_selected(identity, selected)

    def select_all_visible(self) -> int:
        return self.toggle_all_visible(True)

    def toggle_all_visible(self, selected: bool) -> int:
        changed = self._selection.toggle_all(self._visible_pairs(), selected)
        log_action(logger, self.table_id, "selection", "page", level=logging.DEBUG, selected=selected, changed=changed)
        return changed

    def is_all_visible_selected(self) -> bool:
        return self._selection.all_selected(self._visible_pairs())

    def is_some_visible_selected(self) -> bool:
        return self._selection.some_selected(self._visible_pairs())

    def clear_selection(self) -> None:
        self._selection.clear()

    def _visible_pairs(self) -> list[tuple[Any, T]]:
        return [(row.identity, row.record) for row in self._project().rows]

    # -- columns -------------------------------------------------------------

    def set_column_visible(self, column_id: str, visible: bool) -> None:
        column = self.columns.get(column_id)
        if not column.can_hide:
            log_action(logger, self.table_id, "columns", "ignored", level=logging.DEBUG, column_id=column_id)
            return
        hidden = set(self._state.hidden_columns)
        if visible:
            hidden.discard(column_id)
        else:
            hidden.add(column_id)
        self._update(hidden_columns=frozenset(hidden))

    def toggle_column_visibility(self, column_id: str) -> None:
        if column_id not in self.columns:
            raise UnknownColumnError(f"Unknown column id: {column_id!r}")
        self.set_column_visible(column_id, column_id in self._state.hidden_columns)

    # -- rendering -----------------------------------------------------------

    def handle(self) -> SlotHandle[T]:
        return SlotHandle(self)

    def render(self, *, loading: bool | None = None) -> TableView[T]:
        # Slots render first: whatever they change is part of the projected view.
        handle = self.handle()
        filter_bar = render_slot(self.filter_slot, handle)
        action_bar = render_slot(self.action_slot, handle)
        view = self._project(loading=self.loading if loading is None else loading)
        return replace(view, filter_bar=filter_bar, action_bar=action_bar)

    def _project(self, loading: bool = False) -> TableView[T]:
        return build_view(
            self._records,
            self.columns,
            self.state,
            identity=self._identity,
            selectable=self._selectable,
            loading=loading,
            search_placeholder=self.search_placeholder,
            page_size_options=self.settings.page_size_options,
        )

    def _update(self, **changes: Any) -> None:
        self._state = self._state.with_changes(**changes)
        self._clamp_page()
