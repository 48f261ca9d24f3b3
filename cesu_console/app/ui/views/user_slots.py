from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from cesu_console.app.ui.components.row_actions import RowAction
from cesu_console.app.ui.filters import clean_filters
from cesu_console.app.ui.table.columns import read_path
from cesu_console.app.ui.table.slots import SlotHandle

ALL = "all"
USER_TYPES = {"all": "All Users", "admin": "Admin", "user": "CESU"}


def _user_type_filter(value: str) -> Callable[[dict], bool]:
    if value == "admin":
        return lambda user: user.get("role") == "admin"
    return lambda user: user.get("role") != "admin"


def _campus_filter(value: str) -> Callable[[dict], bool]:
    return lambda user: str(read_path(user, "college.campus_id")) == value


def _college_filter(value: str) -> Callable[[dict], bool]:
    return lambda user: str(user.get("college_id")) == value


_PREDICATES = {
    "user_type": _user_type_filter,
    "campus": _campus_filter,
    "college": _college_filter,
}


@dataclass
class UserFilterSlot:
    """User type / campus / college dropdowns, each a named predicate on the table."""

    user_type: str = ALL
    campus: str = ALL
    college: str = ALL
    campuses: list[dict[str, Any]] = field(default_factory=list)
    colleges: list[dict[str, Any]] = field(default_factory=list)

    @property
    def values(self) -> dict[str, str]:
        return {"user_type": self.user_type, "campus": self.campus, "college": self.college}

    @property
    def has_active_filters(self) -> bool:
        return bool(clean_filters(self.values))

    def choose(self, handle: SlotHandle, **choices: Any) -> None:
        for name, value in choices.items():
            if name not in _PREDICATES:
                raise ValueError(f"Unknown user filter: {name!r}")
            if name == "user_type" and str(value) not in USER_TYPES:
                raise ValueError(f"Unknown user type: {value!r}")
            setattr(self, name, ALL if value in (None, "") else str(value))
        self.apply(handle)

    def apply(self, handle: SlotHandle) -> None:
        active = clean_filters(self.values)
        for name, build in _PREDICATES.items():
            if name in active:
                handle.set_filter(name, build(active[name]))
            else:
                handle.clear_filter(name)

    def clear(self, handle: SlotHandle) -> None:
        self.user_type = self.campus = self.college = ALL
        self.apply(handle)

    def render(self, handle: SlotHandle) -> str:
        parts = [
            f"User Type: {USER_TYPES[self.user_type]}",
            f"Campus: {self._label(self.campuses, self.campus, 'All Campuses')}",
            f"College: {self._label(self.colleges, self.college, 'All Colleges')}",
        ]
        if self.has_active_filters:
            parts.append("[Clear]")
        return " | ".join(parts)

    @staticmethod
    def _label(options: list[dict[str, Any]], value: str, fallback: str) -> str:
        if value == ALL:
            return fallback
        match = next((option for option in options if str(option.get("id")) == value), None)
        return str(match.get("name")) if match else value


class UserActionSlot:
    """Bulk activate/deactivate for the current selection, plus the create link."""

    def __init__(
        self,
        on_activate: Callable[[], Any],
        on_deactivate: Callable[[], Any],
        create_route: str = "/admin/users/create",
    ) -> None:
        self.on_activate = on_activate
        self.on_deactivate = on_deactivate
        self.create_route = create_route

    def render(self, handle: SlotHandle) -> list[RowAction]:
        count = len(handle.selected_ids)
        actions: list[RowAction] = []
        if count:
            actions.append(RowAction(f"Activate ({count})", handler=self.on_activate))
            actions.append(RowAction(f"Deactivate ({count})", handler=self.on_deactivate, destructive=True))
        actions.append(RowAction("Add User", route=self.create_route))
        return actions
