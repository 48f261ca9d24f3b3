from pathlib import Path

from cesu_console.app.export.csv_exporter import export_current_view
from cesu_console.app.ui.table.columns import Column
from cesu_console.app.ui.table.engine import DataTable


def _table() -> DataTable:
    records = [{"id": idx, "name": f"college-{idx}", "password": "hunter2", "dean": None} for idx in range(1, 13)]
    columns = [
        Column.from_key("name", header="Name"),
        Column.from_key("password"),
        Column.from_key("dean", hidden=True),
        Column.display("actions", cell=lambda _value, row: "edit"),
    ]
    return DataTable(records, columns, search_key="name")


def test_export_writes_all_matched_rows_in_current_order(tmp_path: Path) -> None:
    table = _table()
    table.set_query("college-1")
    table.toggle_sort("name")
    table.toggle_sort("name")

    path = export_current_view(
        module="colleges",
        view=table.render(),
        columns=table.columns,
        output_dir=str(tmp_path),
        filters={"campus": "2"},
    )

    lines = path.read_text(encoding="utf-8-sig").splitlines()
    assert path.parent == tmp_path
    assert path.name.startswith("colleges_")
    assert lines[0].startswith("# timestamp_local: ")
    assert lines[1:5] == ["# module: colleges", "# query: college-1", "# filters: {'campus': '2'}", "# rows: 4 of 12"]
    assert lines[5] == "name,password"
    assert lines[6:] == ["college-12,—", "college-11,—", "college-10,—", "college-1,—"]


def test_export_of_empty_view_keeps_header(tmp_path: Path) -> None:
    table = DataTable([], [Column.from_key("name")])

    path = export_current_view(module="awards", view=table.render(), columns=table.columns, output_dir=str(tmp_path))

    lines = path.read_text(encoding="utf-8-sig").splitlines()
    assert lines[4] == "# rows: 0 of 0"
    assert lines[5:] == ["name"]
