from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from cesu_console.app.infrastructure.logging.logger import get_logger
from cesu_console.app.ui.table.errors import DuplicateColumnError, MissingAccessorError, UnknownColumnError

T = TypeVar("T")

Accessor = Callable[[T], Any]
CellRenderer = Callable[[Any, T], Any]
RowFilter = Callable[[T, str], bool]

logger = get_logger(__name__)


@dataclass(frozen=True)
class HeaderContext:
    column_id: str
    sortable: bool
    sort_direction: str | None = None


HeaderRenderer = Callable[[HeaderContext], Any]


def read_path(record: Any, path: str) -> Any:
    """Follow a dotted key through mappings and attributes. Any missing link yields None."""
    current = record
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        else:
            current = getattr(current, part, None)
    return current


@dataclass(frozen=True)
class Column(Generic[T]):
    id: str
    accessor: Accessor | None = None
    header: str | HeaderRenderer | None = None
    cell: CellRenderer | None = None
    sortable: bool = True
    filter_fn: RowFilter | None = None
    hidden: bool = False
    can_hide: bool = True

    @classmethod
    def from_key(cls, key: str, **options: Any) -> "Column[T]":
        column_id = options.pop("id", key)
        return cls(id=column_id, accessor=lambda record: read_path(record, key), **options)

    @classmethod
    def display(cls, column_id: str, cell: CellRenderer, **options: Any) -> "Column[T]":
        options.setdefault("can_hide", False)
        return cls(id=column_id, accessor=None, cell=cell, sortable=False, **options)

    @property
    def is_display(self) -> bool:
        return self.accessor is None

    def extract(self, record: T) -> Any:
        if self.accessor is None:
            return None
        try:
            return self.accessor(record)
        except Exception as exc:
            logger.warning("accessor for column %r failed: %s", self.id, exc)
            return None

    def render_cell(self, record: T) -> Any:
        value = self.extract(record)
        if self.cell is None:
            return value
        try:
            return self.cell(value, record)
        except Exception as exc:
            logger.warning("cell renderer for column %r failed: %s", self.id, exc)
            return None

    def render_header(self, sort_direction: str | None = None) -> Any:
        if self.header is None:
            return self.id
        if callable(self.header):
            return self.header(HeaderContext(column_id=self.id, sortable=self.sortable, sort_direction=sort_direction))
        return self.header


class ColumnSet(Generic[T]):
    """Validated, ordered column schema. Misconfiguration fails here, never at render time."""

    def __init__(self, columns: Iterable[Column[T]], search_key: str | None = None) -> None:
        self._columns: tuple[Column[T], ...] = tuple(columns)
        self._by_id: dict[str, Column[T]] = {}
        for column in self._columns:
            if column.id in self._by_id:
                raise DuplicateColumnError(f"Duplicate column id: {column.id!r}")
            if column.accessor is None and column.cell is None:
                raise MissingAccessorError(f"Column {column.id!r} needs an accessor or a cell renderer")
            if column.accessor is None and column.sortable:
                raise MissingAccessorError(f"Column {column.id!r} is sortable but has no accessor")
            self._by_id[column.id] = column

        if search_key is not None:
            target = self._by_id.get(search_key)
            if target is None:
                raise UnknownColumnError(f"search_key {search_key!r} is not a column id")
            if target.accessor is None and target.filter_fn is None:
                raise MissingAccessorError(f"search_key {search_key!r} has neither accessor nor filter_fn")
        self.search_key = search_key

    def __iter__(self):
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, column_id: object) -> bool:
        return column_id in self._by_id

    def get(self, column_id: str) -> Column[T]:
        column = self._by_id.get(column_id)
        if column is None:
            raise UnknownColumnError(f"Unknown column id: {column_id!r}")
        return column

    @property
    def search_column(self) -> Column[T] | None:
        if self.search_key is None:
            return None
        return self._by_id[self.search_key]

    def sortable_ids(self) -> list[str]:
        return [column.id for column in self._columns if column.sortable]

    def initially_hidden(self) -> frozenset[str]:
        return frozenset(column.id for column in self._columns if column.hidden)

    def visible(self, hidden: Iterable[str]) -> Sequence[Column[T]]:
        hidden_ids = set(hidden)
        return [column for column in self._columns if column.id not in hidden_ids]
