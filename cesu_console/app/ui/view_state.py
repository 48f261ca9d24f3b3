from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TableStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    NO_RESULTS = "no_results"
    READY = "ready"


_MESSAGES = {
    TableStatus.LOADING: "Loading...",
    TableStatus.EMPTY: "No records yet.",
    TableStatus.NO_RESULTS: "No results.",
    TableStatus.READY: "Ready",
}


@dataclass(frozen=True)
class TableViewState:
    status: TableStatus
    message: str


def resolve_table_status(*, loading: bool, total_rows: int, filtered_rows: int) -> TableViewState:
    if loading:
        status = TableStatus.LOADING
    elif total_rows == 0:
        status = TableStatus.EMPTY
    elif filtered_rows == 0:
        status = TableStatus.NO_RESULTS
    else:
        status = TableStatus.READY
    return TableViewState(status=status, message=_MESSAGES[status])
