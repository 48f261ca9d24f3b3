from __future__ import annotations


class ErrorBanner:
    @staticmethod
    def format(error_payload: dict | str) -> str:
        if isinstance(error_payload, str):
            return f"[ERROR] code=UI_MESSAGE message={error_payload} trace_id=n/a"
        parts = [
            f"code={error_payload.get('code')}",
            f"message={error_payload.get('message')}",
            f"trace_id={error_payload.get('trace_id') or 'n/a'}",
        ]
        if error_payload.get("suggestion"):
            parts.append(f"suggestion={error_payload['suggestion']}")
        return "[ERROR] " + " ".join(parts)

    @classmethod
    def show(cls, error_payload: dict | str) -> None:
        print(cls.format(error_payload))
