from cesu_console.app.config import ConfigError
from cesu_console.app.ui.table.errors import TableConfigError
from cesu_console.clients.cesu_api.http_client import APIError


class ErrorMapper:
    _KNOWN_CODES = {
        "INVALID_PASSWORD": ("The password you entered is incorrect.", "Re-enter your password to confirm."),
        "VALIDATION_ERROR": ("The request failed validation.", "Review the required fields and their format."),
        "TIMEOUT_ERROR": ("The server took too long to respond.", "Press 'Retry' to repeat the operation."),
        "NETWORK_ERROR": ("The API is unreachable.", "Check your network or VPN and try again."),
        "INTERNAL_ERROR": ("Internal or transient error.", "Try again in a few seconds."),
    }

    _STATUS_HINTS = {
        401: ("UNAUTHENTICATED", "Your session has expired.", "Sign in again."),
        403: ("PERMISSION_DENIED", "You are not allowed to perform this operation.", "Ask an administrator for access."),
        404: ("NOT_FOUND", "The record no longer exists.", "Refresh the list."),
        422: ("VALIDATION_ERROR", "The request failed validation.", "Review the submitted fields."),
        500: ("INTERNAL_ERROR", "The service failed internally.", "Retry and share the trace_id if it persists."),
    }

    @classmethod
    def to_payload(cls, error: Exception) -> dict:
        if isinstance(error, APIError):
            status_code = error.status_code or -1
            mapped = cls._STATUS_HINTS.get(status_code)
            if mapped is None and status_code >= 500:
                mapped = cls._STATUS_HINTS[500]
            if mapped is not None and error.code not in cls._KNOWN_CODES:
                code, message, suggestion = mapped
            else:
                message, suggestion = cls._KNOWN_CODES.get(
                    error.code,
                    (error.message, "Contact support with the trace_id."),
                )
                code = error.code
            return {
                "code": code,
                "message": message,
                "details": error.details,
                "trace_id": error.trace_id,
                "resource": error.resource,
                "suggestion": suggestion,
            }
        if isinstance(error, (TableConfigError, ConfigError)):
            return {
                "code": "CONFIGURATION_ERROR",
                "message": str(error),
                "details": {"type": type(error).__name__},
                "trace_id": None,
                "suggestion": "Fix the configuration and restart the console.",
            }
        return {
            "code": "INTERNAL_ERROR",
            "message": str(error),
            "details": None,
            "trace_id": None,
            "suggestion": "Retry and, if it persists, report the incident.",
        }

    @classmethod
    def to_display_message(cls, error: Exception) -> str:
        payload = cls.to_payload(error)
        return f"[{payload['code']}] {payload['message']} (trace_id={payload['trace_id']})"
