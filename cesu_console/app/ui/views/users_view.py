from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from cesu_console.app.config import AppConfig, TableSettings
from cesu_console.app.export.csv_exporter import export_current_view
from cesu_console.app.infrastructure.errors.error_mapper import ErrorMapper
from cesu_console.app.infrastructure.logging.logger import get_logger, log_action
from cesu_console.app.ui.components.error_banner import ErrorBanner
from cesu_console.app.ui.filters import debounce_text
from cesu_console.app.ui.table.engine import DataTable
from cesu_console.app.ui.table.render import TableView
from cesu_console.app.ui.table_printer import print_table
from cesu_console.app.ui.views.user_columns import UserRecord, full_name, user_columns
from cesu_console.app.ui.views.user_slots import UserActionSlot, UserFilterSlot
from cesu_console.clients.cesu_api.http_client import APIError
from cesu_console.clients.cesu_api.records_client import RecordsClient

RESOURCE = "users"
STAT_KEYS = ("total", "admin", "user", "active", "inactive")

logger = get_logger(__name__)


def _confirm_with_input(message: str) -> bool:
    return input(f"{message} [y/N]: ").strip().lower() in {"y", "yes"}


def is_selectable_user(user: UserRecord) -> bool:
    return user.get("role") != "admin"


class UsersView:
    def __init__(
        self,
        client: RecordsClient,
        config: AppConfig | None = None,
        confirm: Callable[[str], bool] | None = None,
        sleeper: Callable[[float], None] | None = None,
    ) -> None:
        self.client = client
        self.settings = config.table if config else TableSettings()
        self.confirm = confirm or _confirm_with_input
        self.sleeper = sleeper
        self.stats: dict[str, int] = {key: 0 for key in STAT_KEYS}
        self.error: dict[str, Any] | None = None
        self.notice: str | None = None
        self.filter_slot = UserFilterSlot()
        self.action_slot = UserActionSlot(on_activate=self.activate_selected, on_deactivate=self.deactivate_selected)
        self.table: DataTable[UserRecord] = DataTable(
            [],
            user_columns(on_delete=self.delete_user, on_toggle_admin=self.toggle_admin),
            search_key="first_name",
            search_placeholder="Search by name...",
            filter_slot=self.filter_slot,
            action_slot=self.action_slot,
            selectable=is_selectable_user,
            settings=self.settings,
            source_key=RESOURCE,
            table_id=RESOURCE,
        )

    # -- data ----------------------------------------------------------------

    def load_filter_options(self) -> None:
        for resource, target in (("campuses", self.filter_slot.campuses), ("colleges", self.filter_slot.colleges)):
            try:
                target[:] = self.client.list_records(resource).rows
            except APIError as error:
                log_action(logger, RESOURCE, f"load_{resource}", "error", trace_id=error.trace_id, level=logging.WARNING, code=error.code)

    def refresh(self) -> bool:
        self.table.loading = True
        try:
            page = self.client.list_records(RESOURCE)
        except APIError as error:
            self.error = ErrorMapper.to_payload(error)
            log_action(logger, RESOURCE, "refresh", "error", trace_id=error.trace_id, level=logging.WARNING, code=error.code)
            return False
        finally:
            self.table.loading = False
        self.error = None
        self.table.set_records(page.rows, source_key=RESOURCE)
        self.stats = {key: int(page.stats.get(key, 0) or 0) for key in STAT_KEYS}
        log_action(logger, RESOURCE, "refresh", "ok", total=len(page.rows))
        return True

    def search(self, term: str) -> None:
        self.table.set_query(debounce_text(term, wait_ms=self.settings.search_debounce_ms, sleeper=self.sleeper))

    # -- row actions ---------------------------------------------------------

    def delete_user(self, user: UserRecord, password: str | None = None) -> bool:
        if not self.confirm(f"Are you sure you want to delete {full_name(user)}?"):
            return False
        try:
            self.client.archive_record(RESOURCE, user["id"], password)
        except APIError as error:
            self.error = ErrorMapper.to_payload(error)
            log_action(logger, RESOURCE, "delete", "error", trace_id=error.trace_id, user_id=user["id"])
            return False
        self.table.remove_record(user["id"])
        self.notice = "User deleted successfully"
        log_action(logger, RESOURCE, "delete", "ok", user_id=user["id"])
        return True

    def toggle_admin(self, user: UserRecord) -> bool:
        is_admin = user.get("role") == "admin"
        action = "remove admin privileges from" if is_admin else "grant admin privileges to"
        if not self.confirm(f"Are you sure you want to {action} {full_name(user)}?"):
            return False
        try:
            self.client.toggle_admin(user["id"])
        except APIError as error:
            self.error = ErrorMapper.to_payload(error)
            log_action(logger, RESOURCE, "toggle_admin", "error", trace_id=error.trace_id, user_id=user["id"])
            return False
        self.notice = f"Admin privileges {'removed' if is_admin else 'granted'} successfully"
        log_action(logger, RESOURCE, "toggle_admin", "ok", user_id=user["id"])
        return self.refresh()

    # -- bulk actions ----------------------------------------------------------

    def activate_selected(self) -> bool:
        return self._bulk("activate")

    def deactivate_selected(self) -> bool:
        return self._bulk("deactivate")

    def _bulk(self, action: str) -> bool:
        selected_ids = list(self.table.selected_ids)
        if not selected_ids:
            self.error = ErrorMapper.to_payload(ValueError(f"Please select users to {action}"))
            return False
        if not self.confirm(f"Are you sure you want to {action} {len(selected_ids)} user(s)?"):
            return False
        try:
            self.client.bulk_update(RESOURCE, action, selected_ids)
        except APIError as error:
            self.error = ErrorMapper.to_payload(error)
            log_action(logger, RESOURCE, f"bulk_{action}", "error", trace_id=error.trace_id, count=len(selected_ids))
            return False
        self.table.clear_selection()
        self.notice = f"Users {action}d successfully"
        log_action(logger, RESOURCE, f"bulk_{action}", "ok", count=len(selected_ids))
        return self.refresh()

    # -- output ----------------------------------------------------------------

    def render(self) -> TableView[UserRecord]:
        view = self.table.render()
        print_table(view, "User Management")
        print(" | ".join(f"{key}={self.stats[key]}" for key in STAT_KEYS))
        if self.notice:
            print(f"[success] {self.notice}")
            self.notice = None
        if self.error:
            ErrorBanner.show(self.error)
        return view

    def export(self, output_dir: str = "out/exports") -> Path:
        view = self.table.render()
        return export_current_view(
            module=RESOURCE,
            view=view,
            columns=self.table.columns,
            output_dir=output_dir,
            filters=self.filter_slot.values,
        )
