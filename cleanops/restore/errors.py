"""Exceptions raised by the backup restore feature."""

from __future__ import annotations


class RestoreError(Exception):
    """Base exception for restore failures."""


class RestoreConnectionError(RestoreError):
    """Raised when the datastore cannot be reached; aborts the whole run."""


class RestoreStoreError(RestoreError):
    """Raised when the datastore rejects a single read or write."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.detail = message


class TargetIdentityError(RestoreError):
    """Raised when the target identity list cannot be loaded."""


class RestoreContextError(RestoreError):
    """Raised when no company/user context can be established for a run."""
