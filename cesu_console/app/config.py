from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_PAGE_SIZE_OPTIONS = (10, 20, 30, 40, 50)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class TableSettings:
    page_size: int = 10
    page_size_options: tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
    search_debounce_ms: int = 350


@dataclass(frozen=True)
class AppConfig:
    base_url: str
    timeout_seconds: float
    verify_ssl: bool
    retry_max_attempts: int
    retry_backoff_ms: int
    page_size: int = 10
    page_size_options: tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
    search_debounce_ms: int = 350
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "AppConfig":
        load_dotenv(env_file)
        config = cls(
            base_url=os.getenv("CESU_API_BASE_URL", DEFAULT_BASE_URL).strip(),
            timeout_seconds=_read_float("CESU_TIMEOUT_SECONDS", "20"),
            verify_ssl=os.getenv("CESU_VERIFY_SSL", "true").strip().lower() in {"1", "true", "yes", "on"},
            retry_max_attempts=_read_int("CESU_RETRY_MAX_ATTEMPTS", "3"),
            retry_backoff_ms=_read_int("CESU_RETRY_BACKOFF_MS", "150"),
            page_size=_read_int("CESU_TABLE_PAGE_SIZE", "10"),
            page_size_options=_read_int_list("CESU_TABLE_PAGE_SIZE_OPTIONS", "10,20,30,40,50"),
            search_debounce_ms=_read_int("CESU_SEARCH_DEBOUNCE_MS", "350"),
            log_level=os.getenv("CESU_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.base_url:
            raise ConfigError("CESU_API_BASE_URL cannot be empty")
        if self.timeout_seconds <= 0:
            raise ConfigError("CESU_TIMEOUT_SECONDS must be greater than 0")
        if self.retry_max_attempts < 1:
            raise ConfigError("CESU_RETRY_MAX_ATTEMPTS must be >= 1")
        if self.retry_backoff_ms < 0:
            raise ConfigError("CESU_RETRY_BACKOFF_MS must be >= 0")
        if not self.page_size_options or any(size < 1 for size in self.page_size_options):
            raise ConfigError("CESU_TABLE_PAGE_SIZE_OPTIONS must list positive sizes")
        if self.page_size not in self.page_size_options:
            raise ConfigError(
                f"CESU_TABLE_PAGE_SIZE={self.page_size} is not one of CESU_TABLE_PAGE_SIZE_OPTIONS {self.page_size_options}"
            )
        if self.search_debounce_ms < 0:
            raise ConfigError("CESU_SEARCH_DEBOUNCE_MS must be >= 0")

    @property
    def table(self) -> TableSettings:
        return TableSettings(
            page_size=self.page_size,
            page_size_options=self.page_size_options,
            search_debounce_ms=self.search_debounce_ms,
        )


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _read_int_list(name: str, default: str) -> tuple[int, ...]:
    raw = os.getenv(name, default)
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: expected comma-separated integers, got {raw!r}") from exc
