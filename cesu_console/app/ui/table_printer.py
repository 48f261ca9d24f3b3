from __future__ import annotations

from datetime import date, datetime
from typing import Any

from cesu_console.app.ui.table.render import TableView

EMPTY_VALUE = "—"
SORT_MARKERS = {"asc": " ^", "desc": " v"}


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        clean = value.strip()
        return clean or EMPTY_VALUE
    if isinstance(value, bool):
        return "ACTIVE" if value else "INACTIVE"
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        parts = [normalize_value(item) for item in value]
        return ", ".join(part for part in parts if part != EMPTY_VALUE) or EMPTY_VALUE
    return str(value)


def print_table(view: TableView, title: str) -> None:
    print(f"\n{title}")
    if view.filter_bar is not None:
        print(f"[filters] {normalize_value(view.filter_bar)}")
    if view.action_bar is not None:
        print(f"[actions] {normalize_value(view.action_bar)}")
    if view.query:
        print(f"[search] {view.query}")

    if not view.rows:
        print(f"({view.message})")
        print(f"{view.page_label} | {view.selection_label}")
        return

    columns = [(header.column_id, _header_text(header.label, header.sort_direction)) for header in view.headers]
    grid = [
        [_marker(row)] + [normalize_value(row.cells.get(column_id)) for column_id, _ in columns]
        for row in view.rows
    ]
    titles = ["[x]" if view.all_page_selected else "[ ]"] + [label for _, label in columns]
    widths = [max(len(titles[idx]), *(len(line[idx]) for line in grid)) for idx in range(len(titles))]

    print(" | ".join(text.ljust(widths[idx]) for idx, text in enumerate(titles)))
    print("-+-".join("-" * width for width in widths))
    for line in grid:
        print(" | ".join(text.ljust(widths[idx]) for idx, text in enumerate(line)))
    print(f"{view.page_label} | {view.selection_label}")


def _header_text(label: Any, direction: str | None) -> str:
    text = "" if label is None else str(label)
    return f"{text}{SORT_MARKERS.get(direction or '', '')}"


def _marker(row: Any) -> str:
    if not row.selectable:
        return "   "
    return "[x]" if row.selected else "[ ]"
