"""Exception hierarchy for medintake."""

from __future__ import annotations


class IntakeError(Exception):
    """Base exception for all medintake errors."""

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(IntakeError):
    """Request fields or review answers are missing or invalid."""

    def __init__(
        self,
        message: str,
        *,
        field_errors: dict[str, str] | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.field_errors = dict(field_errors or {})


class NotFoundError(IntakeError):
    """A requested form or document does not exist."""


class ConflictError(IntakeError):
    """A form was written with a stale version token."""

    def __init__(self, message: str, *, expected_version: int, actual_version: int) -> None:
        super().__init__(message)
        self.expected_version = expected_version
        self.actual_version = actual_version


class StorageError(IntakeError):
    """Raised when a persistence backend rejects a read or write."""


class DataShapeError(IntakeError):
    """A stored ``questions`` payload does not match the question schema."""


class ProviderError(IntakeError):
    """Raised when the AI extraction capability cannot be invoked."""


class TransientProviderError(ProviderError):
    """Rate limits, timeouts, network and 5xx failures; retrying the batch may succeed."""


class NonRetryableProviderError(ProviderError):
    """Auth errors and bad requests; retrying will not help."""


class ParseError(IntakeError):
    """Provider output could not be parsed as a JSON object."""

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message, details=raw_response[:500] or None)
        self.raw_response = raw_response


class ProcessingTimeout(IntakeError):
    """Documents were still unprocessed after the last polling attempt."""

    def __init__(self, message: str, *, attempts: int, unprocessed_ids: list[int]) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.unprocessed_ids = list(unprocessed_ids)


__all__ = [
    "IntakeError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
    "DataShapeError",
    "ProviderError",
    "TransientProviderError",
    "NonRetryableProviderError",
    "ParseError",
    "ProcessingTimeout",
]
