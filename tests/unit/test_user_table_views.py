from datetime import datetime, timezone

import pytest

from cesu_console.app.ui.components.row_actions import find_action
from cesu_console.app.ui.filters import clean_filters, debounce_text
from cesu_console.app.ui.table.engine import DataTable
from cesu_console.app.ui.views.user_columns import full_name, parse_timestamp, user_columns
from cesu_console.app.ui.views.user_slots import UserActionSlot, UserFilterSlot
from cesu_console.app.ui.views.users_view import is_selectable_user


def _users() -> list[dict]:
    return [
        {
            "id": 1,
            "first_name": "Ana",
            "last_name": "Reyes",
            "email": "ANA@CESU.EDU",
            "role": "admin",
            "is_active": True,
            "college_id": 10,
            "college": {"name": "CEIT", "campus_id": 1, "campus": {"name": "Alangilan"}},
            "created_at": "2024-03-01T08:00:00Z",
        },
        {
            "id": 2,
            "first_name": "Ben",
            "last_name": "Cruz",
            "email": "ben@cesu.edu",
            "role": "user",
            "is_active": False,
            "college_id": 20,
            "college": {"name": "CAS", "campus_id": 2, "campus": {"name": "Pablo Borbon"}},
            "created_at": "2023-11-15T08:00:00Z",
        },
        {
            "id": 3,
            "first_name": "Carla",
            "last_name": "Reyes",
            "email": "carla@cesu.edu",
            "role": "user",
            "is_active": True,
            "college_id": None,
            "college": None,
            "created_at": None,
        },
    ]


def _table(calls: list | None = None, **options) -> DataTable:
    calls = calls if calls is not None else []
    return DataTable(
        _users(),
        user_columns(on_delete=lambda user: calls.append(("delete", user["id"])), on_toggle_admin=lambda user: calls.append(("admin", user["id"]))),
        search_key="first_name",
        selectable=is_selectable_user,
        **options,
    )


def test_user_cells_are_formatted_for_display() -> None:
    view = _table().render()

    first, _, third = view.rows
    assert first.cells["first_name"] == "Ana Reyes"
    assert first.cells["email"] == "ana@cesu.edu"
    assert first.cells["college"] == "Alangilan / CEIT"
    assert first.cells["role"] == "Admin"
    assert first.cells["is_active"] == "Active"
    assert first.cells["created_at"] == "2024-03-01"
    assert third.cells["college"] == "Not assigned"
    assert third.cells["created_at"] is None


def test_name_search_matches_first_or_last_name() -> None:
    table = _table()

    table.set_query("reyes")

    assert [row.identity for row in table.render().rows] == [1, 3]


def test_created_column_sorts_chronologically_with_missing_dates_last() -> None:
    table = _table()

    table.toggle_sort("created_at")
    ascending = [row.identity for row in table.render().rows]
    table.toggle_sort("created_at")
    descending = [row.identity for row in table.render().rows]

    assert ascending == [2, 1, 3]
    assert descending == [1, 2, 3]


def test_sortable_headers_show_indicator_only_when_unsorted() -> None:
    table = _table()
    assert table.render().headers[0].label == "Name ↕"

    table.toggle_sort("first_name")

    assert table.render().headers[0].label == "Name"


def test_row_actions_route_or_call_back() -> None:
    calls: list = []
    view = _table(calls).render()

    admin_actions = view.rows[0].cells["actions"]
    user_actions = view.rows[1].cells["actions"]

    assert find_action(admin_actions, "View Details").invoke() == "/admin/users/1"
    assert find_action(user_actions, "Edit User").invoke() == "/admin/users/2/edit"
    find_action(admin_actions, "Remove Admin").invoke()
    find_action(user_actions, "Make Admin").invoke()
    find_action(user_actions, "Delete User").invoke()
    assert calls == [("admin", 1), ("admin", 2), ("delete", 2)]
    with pytest.raises(KeyError):
        find_action(user_actions, "Remove Admin")


def test_admins_cannot_be_selected() -> None:
    table = _table()

    table.select_all_visible()

    assert table.selected_ids == (2, 3)
    assert table.render().rows[0].selectable is False


def test_filter_slot_contributes_named_predicates() -> None:
    slot = UserFilterSlot(campuses=[{"id": 1, "name": "Alangilan"}], colleges=[{"id": 10, "name": "CEIT"}])
    table = _table(filter_slot=slot)
    handle = table.handle()

    slot.choose(handle, user_type="user")
    assert [row.identity for row in table.render().rows] == [2, 3]

    slot.choose(handle, user_type="all", campus="1")
    view = table.render()
    assert [row.identity for row in view.rows] == [1]
    assert view.filter_bar == "User Type: All Users | Campus: Alangilan | College: All Colleges | [Clear]"

    slot.choose(handle, college=10)
    assert table.state.filters.keys() == {"campus", "college"}

    slot.clear(handle)
    view = table.render()
    assert len(view.rows) == 3
    assert view.filter_bar == "User Type: All Users | Campus: All Campuses | College: All Colleges"


def test_filter_slot_combines_with_name_search() -> None:
    slot = UserFilterSlot()
    table = _table(filter_slot=slot)

    table.set_query("reyes")
    slot.choose(table.handle(), user_type="admin")

    assert [row.identity for row in table.render().rows] == [1]


def test_filter_slot_rejects_unknown_choices() -> None:
    slot = UserFilterSlot()
    handle = _table().handle()

    with pytest.raises(ValueError):
        slot.choose(handle, user_type="superuser")
    with pytest.raises(ValueError):
        slot.choose(handle, department="x")


def test_action_slot_offers_bulk_actions_only_with_a_selection() -> None:
    calls: list[str] = []
    slot = UserActionSlot(on_activate=lambda: calls.append("activate"), on_deactivate=lambda: calls.append("deactivate"))
    table = _table(action_slot=slot)

    assert [str(action) for action in table.render().action_bar] == ["Add User"]

    table.toggle_selected(2)
    table.toggle_selected(3)
    actions = table.render().action_bar

    assert [str(action) for action in actions] == ["Activate (2)", "Deactivate (2)", "Add User"]
    find_action(actions, "Deactivate (2)").invoke()
    assert calls == ["deactivate"]
    assert find_action(actions, "Add User").invoke() == "/admin/users/create"


def test_user_helpers() -> None:
    assert full_name({"first_name": "Ana", "last_name": None}) == "Ana"
    assert parse_timestamp("2024-03-01T08:00:00Z") == datetime(2024, 3, 1, 8, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert clean_filters({"campus": "all", "college": "", "user_type": "admin", "x": None}) == {"user_type": "admin"}


def test_debounce_waits_before_returning_term() -> None:
    waits: list[float] = []

    assert debounce_text("ana", wait_ms=350, sleeper=waits.append) == "ana"
    assert debounce_text("ben", wait_ms=0, sleeper=waits.append) == "ben"
    assert waits == [0.35]
