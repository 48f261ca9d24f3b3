from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from cesu_console.app.ui.table.errors import RecordIdentityError

T = TypeVar("T")

Identity = Hashable
IdentityFn = Callable[[T], Identity]
SelectablePredicate = Callable[[T], bool]


def default_identity(record: Any) -> Identity:
    if isinstance(record, Mapping):
        identity = record.get("id")
    else:
        identity = getattr(record, "id", None)
    if identity is None:
        raise RecordIdentityError(f"Record has no 'id': {record!r}")
    return identity


def always_selectable(_record: Any) -> bool:
    return True


def index_records(records: Iterable[T], identity: IdentityFn = default_identity) -> dict[Identity, T]:
    indexed: dict[Identity, T] = {}
    for record in records:
        key = identity(record)
        if key in indexed:
            raise RecordIdentityError(f"Duplicate record identity: {key!r}")
        indexed[key] = record
    return indexed


class SelectionManager(Generic[T]):
    """Selected identities for one table. Only present, selectable records can be selected."""

    def __init__(self, selectable: SelectablePredicate = always_selectable) -> None:
        self._selectable = selectable
        self._records: dict[Identity, T] = {}
        self._selected: dict[Identity, None] = {}

    def can_select(self, record: T) -> bool:
        try:
            return bool(self._selectable(record))
        except Exception:
            return False

    def sync(self, records: Mapping[Identity, T]) -> list[Identity]:
        """Adopt a fresh record index and drop selections that are gone or no longer selectable."""
        self._records = dict(records)
        dropped = [
            identity
            for identity in self._selected
            if identity not in self._records or not self.can_select(self._records[identity])
        ]
        for identity in dropped:
            del self._selected[identity]
        return dropped

    def is_selected(self, identity: Identity) -> bool:
        return identity in self._selected

    def set_selected(self, identity: Identity, selected: bool) -> bool:
        record = self._records.get(identity)
        if selected:
            if record is None or not self.can_select(record):
                return False
            self._selected[identity] = None
            return True
        if identity not in self._selected:
            return False
        del self._selected[identity]
        return True

    def toggle(self, identity: Identity) -> bool:
        return self.set_selected(identity, not self.is_selected(identity))

    def toggle_all(self, rows: Iterable[tuple[Identity, T]], selected: bool) -> int:
        changed = 0
        for identity, record in rows:
            if not self.can_select(record):
                continue
            if selected and identity not in self._selected:
                self._selected[identity] = None
                changed += 1
            elif not selected and identity in self._selected:
                del self._selected[identity]
                changed += 1
        return changed

    def select_all(self, rows: Iterable[tuple[Identity, T]]) -> int:
        return self.toggle_all(rows, True)

    def all_selected(self, rows: Iterable[tuple[Identity, T]]) -> bool:
        candidates = [identity for identity, record in rows if self.can_select(record)]
        return bool(candidates) and all(identity in self._selected for identity in candidates)

    def some_selected(self, rows: Iterable[tuple[Identity, T]]) -> bool:
        return any(identity in self._selected for identity, _ in rows)

    def clear(self) -> int:
        count = len(self._selected)
        self._selected.clear()
        return count

    @property
    def selected_ids(self) -> tuple[Identity, ...]:
        return tuple(self._selected)

    def selected_records(self) -> list[T]:
        return [record for identity, record in self._records.items() if identity in self._selected]

    def __len__(self) -> int:
        return len(self._selected)
