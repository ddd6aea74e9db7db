"""Custom exception hierarchy for linewatch."""

from __future__ import annotations


class LinewatchError(Exception):
    """Base exception for all linewatch errors."""


class LinewatchConfigError(LinewatchError):
    """Invalid or missing configuration."""


class StoreError(LinewatchError):
    """I/O failure talking to the backing document store."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class DocumentNotFoundError(LinewatchError):
    """The dashboard document does not exist (yet).

    Raised by field-level updates against a path that was never seeded.
    Ingestion surfaces this as HTTP 404; operator commands log it.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Document not found: {path}")


class InvalidRequestError(LinewatchError):
    """Request payload is missing the expected top-level shape."""

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        self.status_code = status_code
        super().__init__(message)
