from __future__ import annotations


class DashboardError(Exception):
    """Base class for errors surfaced to the dashboard user."""


class AuthError(DashboardError):
    def __init__(self, code: str, detail: str | None = None):
        self.code = code
        self.detail = detail
        super().__init__(detail or code)


class StoreError(DashboardError):
    pass


class ReadOnlyPeriodError(DashboardError):
    pass


class DuplicateEntryError(DashboardError, ValueError):
    pass


class WorkbookFormatError(DashboardError, ValueError):
    pass
