from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Any

from cesu_console.app.ui.table.columns import ColumnSet
from cesu_console.app.ui.table.render import TableView
from cesu_console.app.ui.table_printer import EMPTY_VALUE, normalize_value

SENSITIVE_KEYS = {"token", "refresh_token", "secret", "password", "access_token"}


def export_current_view(
    *,
    module: str,
    view: TableView,
    columns: ColumnSet,
    output_dir: str = "out/exports",
    filters: dict[str, Any] | None = None,
) -> Path:
    """Write every matched row (all pages, current order) for the visible data columns."""
    visible_ids = {header.column_id for header in view.headers}
    export_columns = [column for column in columns if column.id in visible_ids and not column.is_display]
    headers = [column.id for column in export_columns]

    destination = Path(output_dir)
    destination.mkdir(parents=True, exist_ok=True)

    now = datetime.now().astimezone()
    path = destination / f"{module}_{now.strftime('%Y%m%d_%H%M%S')}.csv"

    with path.open("w", newline="", encoding="utf-8-sig") as handle:
        handle.write(f"# timestamp_local: {now.isoformat()}\n")
        handle.write(f"# module: {module}\n")
        handle.write(f"# query: {view.query or ''}\n")
        handle.write(f"# filters: {filters or {}}\n")
        handle.write(f"# rows: {view.filtered_rows} of {view.total_rows}\n")
        writer = csv.DictWriter(handle, fieldnames=headers, extrasaction="ignore")
        writer.writeheader()
        for record in view.matched:
            writer.writerow(
                {
                    column.id: EMPTY_VALUE if _is_sensitive(column.id) else normalize_value(column.extract(record))
                    for column in export_columns
                }
            )
    return path


def _is_sensitive(header: str) -> bool:
    return any(token in header.lower() for token in SENSITIVE_KEYS)
