from __future__ import annotations


class TableConfigError(ValueError):
    """Raised when a table is wired up incorrectly. Never raised for bad record data."""


class DuplicateColumnError(TableConfigError):
    pass


class MissingAccessorError(TableConfigError):
    pass


class UnknownColumnError(TableConfigError):
    pass


class RecordIdentityError(TableConfigError):
    """Records without an identity, or two records sharing one."""
