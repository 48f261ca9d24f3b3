from __future__ import annotations

from cesu_console.app.config import AppConfig, ConfigError
from cesu_console.app.infrastructure.errors.error_mapper import ErrorMapper
from cesu_console.app.infrastructure.logging.logger import configure_logging
from cesu_console.app.ui.components.error_banner import ErrorBanner
from cesu_console.app.ui.components.row_actions import find_action
from cesu_console.app.ui.views.users_view import UsersView
from cesu_console.clients.cesu_api.http_client import HttpClient
from cesu_console.clients.cesu_api.records_client import RecordsClient

MENU = (
    "Users [s=search, n/p=page, z=page size, o=sort, x=select, a=select page, "
    "m=row menu, f=filters, c=clear filters, b=activate, d=deactivate, e=export, r=refresh, Enter=exit]: "
)


def _print_runtime_config(config: AppConfig) -> None:
    print("CESU Console")
    print(f"Base URL: {config.base_url}")
    print(f"Timeout: {config.timeout_seconds}s")
    print(f"GET Retry: {config.retry_max_attempts} attempts, base backoff {config.retry_backoff_ms}ms")
    print(f"Page size: {config.page_size} (options {', '.join(str(size) for size in config.page_size_options)})")


def build_users_view(config: AppConfig) -> UsersView:
    http = HttpClient(
        base_url=config.base_url,
        timeout_seconds=config.timeout_seconds,
        verify_ssl=config.verify_ssl,
        retry_max_attempts=config.retry_max_attempts,
        retry_backoff_ms=config.retry_backoff_ms,
    )
    return UsersView(RecordsClient(http), config=config)


def _run_row_action(view: UsersView, raw_id: str) -> None:
    row = next((row for row in view.table.render().rows if str(row.identity) == raw_id), None)
    if row is None:
        ErrorBanner.show(f"User {raw_id} is not on this page")
        return
    actions = row.cells.get("actions") or []
    label = input(f"Action {[str(action) for action in actions]}: ").strip()
    try:
        result = find_action(actions, label).invoke()
    except KeyError:
        ErrorBanner.show(f"Unknown action: {label}")
        return
    if isinstance(result, str):
        print(f"[open] {result}")


def handle_command(view: UsersView, command: str) -> bool:
    """Apply one menu command. Returns False when the operator leaves the screen."""
    table = view.table
    if command == "":
        return False
    if command == "s":
        view.search(input("Search by name (empty=all): "))
    elif command == "n":
        table.next_page()
    elif command == "p":
        table.prev_page()
    elif command == "z":
        raw = input(f"Rows per page {list(view.settings.page_size_options)}: ").strip()
        if raw.isdigit() and int(raw) > 0:
            table.set_page_size(int(raw))
    elif command == "o":
        column_id = input(f"Sort by {table.columns.sortable_ids()}: ").strip()
        if column_id in table.columns.sortable_ids():
            table.toggle_sort(column_id)
    elif command == "x":
        raw = input("User id: ").strip()
        table.toggle_selected(int(raw) if raw.isdigit() else raw)
    elif command == "a":
        table.toggle_all_visible(not table.is_all_visible_selected())
    elif command == "m":
        _run_row_action(view, input("User id: ").strip())
    elif command == "f":
        view.filter_slot.choose(
            table.handle(),
            user_type=input("User type [all/admin/user]: ").strip() or "all",
            campus=input("Campus id (empty=all): ").strip() or "all",
            college=input("College id (empty=all): ").strip() or "all",
        )
    elif command == "c":
        view.filter_slot.clear(table.handle())
    elif command == "b":
        view.activate_selected()
    elif command == "d":
        view.deactivate_selected()
    elif command == "e":
        print(f"[export] {view.export()}")
    elif command == "r":
        view.refresh()
    else:
        ErrorBanner.show(f"Unknown option: {command}")
    return True


def main() -> None:
    try:
        config = AppConfig.from_env()
    except ConfigError as error:
        ErrorBanner.show(ErrorMapper.to_payload(error))
        raise SystemExit(2) from error
    configure_logging(config.log_level)
    _print_runtime_config(config)

    view = build_users_view(config)
    view.load_filter_options()
    view.refresh()
    while True:
        view.render()
        try:
            command = input(MENU).strip().lower()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        try:
            if not handle_command(view, command):
                break
        except ValueError as error:
            ErrorBanner.show(str(error))


if __name__ == "__main__":
    main()
