from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from cesu_console.app.ui.components.row_actions import RowAction
from cesu_console.app.ui.table.columns import Column, HeaderContext, read_path

UserRecord = dict[str, Any]


def full_name(user: UserRecord) -> str:
    return " ".join(part for part in (user.get("first_name"), user.get("last_name")) if part)


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def sortable_header(title: str) -> Callable[[HeaderContext], str]:
    def _render(context: HeaderContext) -> str:
        return title if context.sort_direction else f"{title} ↕"

    return _render


def _name_matches(user: UserRecord, query: str) -> bool:
    return query.casefold() in full_name(user).casefold()


def _college_cell(college: Any, _user: UserRecord) -> str:
    if not college:
        return "Not assigned"
    campus = read_path(college, "campus.name") or "—"
    return f"{campus} / {read_path(college, 'name') or '—'}"


def _created_cell(created: datetime | None, _user: UserRecord) -> str | None:
    return created.date().isoformat() if created else None


def user_columns(
    on_delete: Callable[[UserRecord], Any],
    on_toggle_admin: Callable[[UserRecord], Any],
    base_path: str = "/admin/users",
) -> list[Column[UserRecord]]:
    def _actions(_value: Any, user: UserRecord) -> list[RowAction]:
        is_admin = user.get("role") == "admin"
        return [
            RowAction("View Details", route=f"{base_path}/{user['id']}"),
            RowAction("Edit User", route=f"{base_path}/{user['id']}/edit"),
            RowAction("Remove Admin" if is_admin else "Make Admin", handler=lambda: on_toggle_admin(user)),
            RowAction("Delete User", handler=lambda: on_delete(user), destructive=True),
        ]

    return [
        Column.from_key(
            "first_name",
            header=sortable_header("Name"),
            cell=lambda _value, user: full_name(user),
            filter_fn=_name_matches,
        ),
        Column.from_key("email", header="Email", cell=lambda value, _user: (value or "").lower(), sortable=False),
        Column.from_key("college", header="Campus & College", cell=_college_cell, sortable=False),
        Column.from_key(
            "role",
            header="Role",
            cell=lambda value, _user: "Admin" if value == "admin" else "CESU",
            sortable=False,
        ),
        Column.from_key(
            "is_active",
            header="Status",
            cell=lambda value, _user: "Active" if value else "Inactive",
            sortable=False,
        ),
        Column(
            id="created_at",
            accessor=lambda user: parse_timestamp(user.get("created_at")),
            header=sortable_header("Created"),
            cell=_created_cell,
        ),
        Column.display("actions", cell=_actions, header=""),
    ]
