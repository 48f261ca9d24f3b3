from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class RowAction:
    """One entry of a row menu or action bar: either a route to open or a handler to call."""

    label: str
    route: str | None = None
    handler: Callable[[], Any] | None = None
    destructive: bool = False

    def invoke(self) -> Any:
        if self.handler is None:
            return self.route
        return self.handler()

    def __str__(self) -> str:
        return self.label


def find_action(actions: list[RowAction], label: str) -> RowAction:
    for action in actions:
        if action.label == label:
            return action
    raise KeyError(f"No action labelled {label!r}")
