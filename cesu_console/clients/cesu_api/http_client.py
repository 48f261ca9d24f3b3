import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from cesu_console.app.infrastructure.logging.logger import get_logger, log_action

logger = get_logger(__name__)


@dataclass
class APIError(Exception):
    code: str
    message: str
    details: dict[str, Any] | None = None
    trace_id: str | None = None
    status_code: int | None = None
    path: str | None = None

    @property
    def resource(self) -> str | None:
        """First segment of the request path, e.g. ``users`` for ``/users/4``."""
        if not self.path:
            return None
        return self.path.strip("/").split("/", 1)[0] or None

    def __str__(self) -> str:
        where = f" {self.path}" if self.path else ""
        return f"[{self.status_code}]{where} {self.code}: {self.message}"


class HttpClient:
    """Thin JSON client for the CESU REST API. Only reads are retried."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 20,
        verify_ssl: bool = True,
        retry_max_attempts: int = 3,
        retry_backoff_ms: int = 150,
        transport: Callable[..., httpx.Response] | None = None,
        sleeper: Callable[[float], None] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.verify_ssl = verify_ssl
        self.retry_max_attempts = max(1, retry_max_attempts)
        self.retry_backoff_ms = max(0, retry_backoff_ms)
        self.transport = transport or httpx.request
        self.sleeper = sleeper or time.sleep
        self.token: str | None = None

    def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        headers = self._headers(kwargs.pop("headers", None))
        method = method.upper()
        retryable = method == "GET"

        attempt = 0
        while True:
            attempt += 1
            last_try = not retryable or attempt >= self.retry_max_attempts
            try:
                response = self.transport(
                    method,
                    f"{self.base_url}{path}",
                    timeout=self.timeout_seconds,
                    verify=self.verify_ssl,
                    headers=headers,
                    **kwargs,
                )
            except httpx.TimeoutException as exc:
                if last_try:
                    raise APIError(
                        code="TIMEOUT_ERROR",
                        message="The request timed out. Check your connection and try again.",
                        path=path,
                    ) from exc
                self._retry(method, path, attempt, "timeout")
                continue
            except httpx.TransportError as exc:
                if last_try:
                    raise APIError(
                        code="NETWORK_ERROR",
                        message="Could not reach the API. Retry manually.",
                        path=path,
                    ) from exc
                self._retry(method, path, attempt, "network")
                continue

            if response.status_code < 400:
                return self._safe_json(response)
            if 500 <= response.status_code <= 599 and not last_try:
                self._retry(method, path, attempt, f"http_{response.status_code}")
                continue
            raise self._to_error(response, path)

    def _headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        headers = {"Accept": "application/json", **(extra or {})}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _retry(self, method: str, path: str, attempt: int, reason: str) -> None:
        delay = (self.retry_backoff_ms * attempt) / 1000
        log_action(logger, "http", f"{method} {path}", "retry", level=logging.WARNING, attempt=attempt, reason=reason, delay=delay)
        self.sleeper(delay)

    def _to_error(self, response: httpx.Response, path: str) -> APIError:
        payload = self._safe_json(response)
        return APIError(
            code=payload.get("code", "HTTP_ERROR"),
            message=payload.get("message", response.text),
            details=payload.get("errors") or payload.get("details"),
            trace_id=payload.get("trace_id") or response.headers.get("X-Trace-ID") or response.headers.get("X-Request-Id"),
            status_code=response.status_code,
            path=path,
        )

    @staticmethod
    def _safe_json(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError:
            return {"message": response.text}
        # List endpoints (campuses, colleges) may answer with a bare array.
        return payload if isinstance(payload, dict) else {"data": payload}
