from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cesu_console.clients.cesu_api.http_client import HttpClient


@dataclass(frozen=True)
class RecordPage:
    rows: list[dict[str, Any]]
    stats: dict[str, Any] = field(default_factory=dict)


def unwrap_rows(resource: str, payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Accept `{"data": [...]}`, `{"<resource>": {"data": [...]}}` and `{"<resource>": [...]}`."""
    for candidate in (payload.get(resource), payload):
        if isinstance(candidate, list):
            return [row for row in candidate if isinstance(row, dict)]
        if isinstance(candidate, dict):
            data = candidate.get("data")
            if isinstance(data, list):
                return [row for row in data if isinstance(row, dict)]
    return []


class RecordsClient:
    def __init__(self, http: HttpClient) -> None:
        self.http = http

    def list_records(self, resource: str, params: dict[str, Any] | None = None) -> RecordPage:
        payload = self.http.request("GET", f"/{resource}", params=params or None)
        stats = payload.get("stats")
        return RecordPage(rows=unwrap_rows(resource, payload), stats=stats if isinstance(stats, dict) else {})

    def archive_record(self, resource: str, record_id: Any, password: str | None = None) -> dict[str, Any]:
        if password is None:
            return self.http.request("DELETE", f"/{resource}/{record_id}")
        return self.http.request("DELETE", f"/{resource}/{record_id}", json={"password": password})

    def bulk_update(self, resource: str, action: str, record_ids: list[Any]) -> dict[str, Any]:
        key = f"{resource.rstrip('s')}_ids"
        return self.http.request("PATCH", f"/{resource}/bulk-{action}", json={key: list(record_ids)})

    def toggle_admin(self, user_id: Any) -> dict[str, Any]:
        return self.http.request("PATCH", f"/users/{user_id}/toggle-admin")
