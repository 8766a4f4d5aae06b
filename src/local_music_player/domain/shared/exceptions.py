"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when a mutation receives an out-of-range index or a duplicate track."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class LoadError(DomainError):
    """Raised by an audio engine when a resource cannot be opened."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        super().__init__(message, code="LOAD_ERROR")
        self.file_path = file_path


class PlaybackError(DomainError):
    """Raised by an audio engine when playback fails to start or continue."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        super().__init__(message, code="PLAYBACK_ERROR")
        self.file_path = file_path


class RestoreError(DomainError):
    """Raised when a persisted snapshot cannot be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="RESTORE_ERROR")
