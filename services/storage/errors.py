"""Storage and access errors shared by the intake and dashboard services."""

from typing import Any, Optional

# Postgres SQLSTATE for unique_violation, as relayed by PostgREST
UNIQUE_VIOLATION = "23505"


class StoreError(Exception):
    """Structured failure reported by a data store insert or query."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.details = details

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code={self.code})"
        return self.message


class DashboardAccessError(Exception):
    """Base class for dashboard gatekeeping failures."""


class NotAuthenticatedError(DashboardAccessError):
    """No valid session for the supplied access token."""


class AccessDeniedError(DashboardAccessError):
    """Session exists but the user does not hold the admin role."""

    def __init__(self, message: str = "You don't have permission to access this page"):
        super().__init__(message)
