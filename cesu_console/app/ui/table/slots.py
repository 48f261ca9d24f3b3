from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Generic, Protocol, TypeVar, Union

if TYPE_CHECKING:
    from cesu_console.app.ui.table.engine import DataTable

T = TypeVar("T")


class SlotHandle(Generic[T]):
    """What a filter bar or action bar may read and change on its table.

    Slots never hide rows themselves: filtering goes through named predicates
    so the table's own derived view stays the single source of what is shown.
    """

    def __init__(self, table: "DataTable[T]") -> None:
        self._table = table

    @property
    def records(self) -> tuple[T, ...]:
        return self._table.records

    @property
    def selected_ids(self) -> tuple[Any, ...]:
        return self._table.selected_ids

    def selected_records(self) -> list[T]:
        return self._table.selected_records()

    @property
    def active_filters(self) -> tuple[str, ...]:
        return tuple(self._table.state.filters)

    def set_filter(self, name: str, predicate: Callable[[T], bool]) -> None:
        self._table.set_filter(name, predicate)

    def clear_filter(self, name: str) -> None:
        self._table.clear_filter(name)

    def clear_filters(self) -> None:
        self._table.clear_filters()

    def clear_selection(self) -> None:
        self._table.clear_selection()

    def remove_record(self, identity: Any) -> bool:
        return self._table.remove_record(identity)


class TableSlot(Protocol[T]):
    def render(self, handle: SlotHandle[T]) -> Any: ...


Slot = Union[TableSlot, Callable[[SlotHandle], Any]]


def render_slot(slot: Slot | None, handle: SlotHandle[T]) -> Any:
    if slot is None:
        return None
    render = getattr(slot, "render", None)
    if callable(render):
        return render(handle)
    return slot(handle)
