# src/day_planner/sync/errors.py

from __future__ import annotations


class SyncError(Exception):
    """Base class for every remote backup failure."""


class CredentialNotSetError(SyncError):
    def __init__(self) -> None:
        super().__init__("GitHub token not set")


class InvalidCredentialError(SyncError):
    pass


class BackupNotFoundError(SyncError):
    """No backup document exists yet. Callers usually treat this as a warning."""

    def __init__(self) -> None:
        super().__init__("No todo gist found")


class CorruptBackupError(SyncError):
    pass


class TransportError(SyncError):
    def __init__(self, status: int | None, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(message if status is None else f"{message} (HTTP {status})")


def friendly_sync_error_message(err: Exception) -> str:
    if isinstance(err, CredentialNotSetError):
        return "Please set your GitHub token first (/token <ghp_...>)."
    if isinstance(err, BackupNotFoundError):
        return "No backup found in cloud."
    if isinstance(err, CorruptBackupError):
        return f"Backup is unreadable: {err}"
    if isinstance(err, TransportError):
        return f"GitHub request failed: {err}"
    return str(err).strip() or "Sync error."
