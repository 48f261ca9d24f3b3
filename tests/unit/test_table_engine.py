from decimal import Decimal

import pytest

from cesu_console.app.config import TableSettings
from cesu_console.app.ui.table.columns import Column
from cesu_console.app.ui.table.engine import DataTable
from cesu_console.app.ui.table.errors import DuplicateColumnError, RecordIdentityError, TableConfigError, UnknownColumnError
from cesu_console.app.ui.table.sorting import SortState


def _records(count: int) -> list[dict]:
    return [
        {"id": idx, "name": f"campus-{idx:02d}", "status": "active" if idx % 2 else "inactive", "v": idx % 3}
        for idx in range(1, count + 1)
    ]


def _columns() -> list[Column]:
    return [
        Column.from_key("name", header="Name"),
        Column.from_key("status", header="Status", sortable=False),
        Column.from_key("v", header="Value"),
        Column.display("actions", cell=lambda _value, row: f"edit-{row['id']}"),
    ]


def _table(records: list[dict], **options) -> DataTable:
    options.setdefault("search_key", "name")
    return DataTable(records, _columns(), **options)


def _visible_ids(table: DataTable) -> list[int]:
    return [row.identity for row in table.render().rows]


def test_derived_view_is_idempotent() -> None:
    table = _table(_records(25))
    table.set_query("campus-1")
    table.toggle_sort("v")
    table.toggle_selected(10)

    assert table.render() == table.render()


def test_sort_is_stable_for_equal_values() -> None:
    table = _table([{"id": 1, "v": 5}, {"id": 2, "v": 5}, {"id": 3, "v": 1}], search_key=None)

    table.toggle_sort("v")

    assert _visible_ids(table) == [3, 1, 2]


def test_query_and_slot_filter_must_both_pass() -> None:
    records = [
        {"id": 1, "name": "abc north", "status": "active", "v": 1},
        {"id": 2, "name": "abc south", "status": "inactive", "v": 1},
        {"id": 3, "name": "xyz", "status": "active", "v": 1},
    ]
    table = _table(records)

    table.set_query("ABC")
    table.set_filter("status", lambda row: row["status"] == "active")
    assert _visible_ids(table) == [1]

    table.set_query("")
    assert _visible_ids(table) == [1, 3]

    table.set_query("abc")
    table.clear_filter("status")
    assert _visible_ids(table) == [1, 2]


def test_page_index_clamps_when_dataset_shrinks() -> None:
    records = _records(25)
    table = _table(records)
    table.goto_page(2)
    assert _visible_ids(table) == [21, 22, 23, 24, 25]

    table.set_records(records[:5])

    view = table.render()
    assert table.state.page.index == 0
    assert view.page_index == 0
    assert [row.identity for row in view.rows] == [1, 2, 3, 4, 5]


def test_page_index_clamps_when_filter_shrinks_matches() -> None:
    table = _table(_records(25))
    table.last_page()

    table.set_filter("first_five", lambda row: row["id"] <= 5)

    assert table.state.page.index == 0
    assert _visible_ids(table) == [1, 2, 3, 4, 5]


def test_selection_is_pruned_when_record_disappears() -> None:
    records = _records(12)
    table = _table(records)
    table.toggle_selected(7)
    table.toggle_selected(8)

    table.set_records([record for record in records if record["id"] != 7])

    view = table.render()
    assert table.is_selected(7) is False
    assert table.selected_ids == (8,)
    assert view.selection_label == "1 of 11 row(s) selected."


def test_select_all_only_covers_the_visible_page() -> None:
    table = _table(_records(30))

    changed = table.select_all_visible()

    assert changed == 10
    assert table.selected_ids == tuple(range(1, 11))
    assert table.is_all_visible_selected() is True
    table.next_page()
    assert table.is_some_visible_selected() is False


def test_three_header_clicks_return_to_input_order() -> None:
    records = _records(9)
    table = _table(records)
    original = [record["id"] for record in records]

    table.toggle_sort("v")
    ascending = _visible_ids(table)
    table.toggle_sort("v")
    descending = _visible_ids(table)
    table.toggle_sort("v")

    assert ascending == [3, 6, 9, 1, 4, 7, 2, 5, 8]
    assert descending == [2, 5, 8, 1, 4, 7, 3, 6, 9]
    assert table.state.sort is None
    assert _visible_ids(table) == original


def test_query_and_sort_changes_reset_to_first_page() -> None:
    table = _table(_records(30))
    table.goto_page(2)
    table.set_query("campus")
    assert table.state.page.index == 0

    table.goto_page(2)
    table.toggle_sort("name")
    assert table.state.page.index == 0


def test_page_size_change_keeps_first_visible_row() -> None:
    table = _table(_records(50), settings=TableSettings(page_size=10))
    table.goto_page(3)

    table.set_page_size(20)

    assert table.state.page.index == 1
    assert _visible_ids(table)[0] == 21


def test_selection_survives_paging_sorting_and_filtering() -> None:
    table = _table(_records(30))
    table.toggle_selected(3)
    table.next_page()
    table.toggle_sort("name")
    table.set_query("campus-0")

    assert table.is_selected(3) is True
    assert [record["id"] for record in table.selected_records()] == [3]


def test_non_selectable_rows_are_excluded_from_select_all() -> None:
    table = _table(_records(4), selectable=lambda row: row["status"] == "active")

    table.select_all_visible()

    view = table.render()
    assert table.selected_ids == (1, 3)
    assert [row.selectable for row in view.rows] == [True, False, True, False]
    assert view.all_page_selected is True


def test_header_checkbox_unchecks_visible_page() -> None:
    table = _table(_records(15))
    table.select_all_visible()
    table.next_page()
    table.toggle_selected(12)
    table.prev_page()

    table.toggle_all_visible(False)

    assert table.selected_ids == (12,)


def test_new_source_key_resets_state() -> None:
    table = _table(_records(30), source_key="campuses")
    table.set_query("campus")
    table.toggle_sort("name")
    table.goto_page(1)
    table.toggle_selected(1)
    table.set_filter("status", lambda row: True)

    table.set_records(_records(5), source_key="colleges")

    state = table.state
    assert state.query == ""
    assert state.sort is None
    assert state.page.index == 0
    assert state.selected == ()
    assert dict(state.filters) == {}


def test_refresh_with_same_source_keeps_state() -> None:
    table = _table(_records(30), source_key="campuses")
    table.set_query("campus-1")
    table.toggle_selected(11)

    table.set_records(_records(30), source_key="campuses")

    assert table.state.query == "campus-1"
    assert table.selected_ids == (11,)


def test_remove_record_notifies_caller_and_prunes_selection() -> None:
    removed: list[int] = []
    records = _records(11)
    table = _table(records, on_remove=removed.append)
    table.last_page()
    table.toggle_selected(11)

    assert table.remove_record(11) is True
    assert table.remove_record(99) is False

    assert removed == [11]
    assert table.selected_ids == ()
    assert table.state.page.index == 0
    assert len(records) == 11


def test_unknown_sort_column_is_a_configuration_error() -> None:
    table = _table(_records(3))

    with pytest.raises(UnknownColumnError):
        table.toggle_sort("missing")


def test_non_sortable_column_click_is_ignored() -> None:
    table = _table(_records(3))
    table.toggle_sort("name")

    assert table.toggle_sort("status") == SortState("name", "asc")
    with pytest.raises(TableConfigError):
        table.set_sort("actions")


def test_construction_fails_fast_on_bad_configuration() -> None:
    with pytest.raises(DuplicateColumnError):
        DataTable([], [Column.from_key("name"), Column.from_key("name")])
    with pytest.raises(RecordIdentityError):
        DataTable([{"id": 1}, {"id": 1}], [Column.from_key("id")])


def test_column_visibility_toggles_rendered_headers() -> None:
    table = _table(_records(3))

    table.toggle_column_visibility("status")
    hidden = [header.column_id for header in table.render().headers]
    table.toggle_column_visibility("status")
    shown = [header.column_id for header in table.render().headers]
    table.set_column_visible("actions", False)

    assert hidden == ["name", "v", "actions"]
    assert shown == ["name", "status", "v", "actions"]
    assert "actions" in [header.column_id for header in table.render().headers]
    with pytest.raises(UnknownColumnError):
        table.toggle_column_visibility("nope")


def test_hidden_column_still_filters_and_sorts() -> None:
    table = _table(_records(6))
    table.set_column_visible("name", False)

    table.set_query("campus-05")

    view = table.render()
    assert [row.identity for row in view.rows] == [5]
    assert "name" not in view.rows[0].cells


def test_engine_never_mutates_caller_records() -> None:
    records = _records(12)
    snapshot = [dict(record) for record in records]
    table = _table(records)

    table.toggle_sort("v")
    table.set_query("campus")
    table.remove_record(1)

    assert records == snapshot


def test_selection_footer_counts_only_rows_that_pass_the_filters() -> None:
    table = _table(_records(5))
    table.select_all_visible()

    table.set_query("campus-01")

    view = table.render()
    assert view.selection_label == "1 of 1 row(s) selected."
    assert view.selected_total == 5
    table.set_query("nothing")
    assert table.render().selection_label == "0 of 0 row(s) selected."


def test_render_survives_decimal_nan_in_sorted_column() -> None:
    table = _table([{"id": 1, "v": Decimal("NaN")}, {"id": 2, "v": Decimal(2)}, {"id": 3, "v": Decimal(1)}], search_key=None)

    table.toggle_sort("v")

    assert _visible_ids(table) == [3, 2, 1]
