from __future__ import annotations

"""Exception hierarchy for the bulk upload pipeline.

Per-row client validation problems are data (``models.ValidationError``), not
exceptions: they are collected for the whole batch and never raised.
"""

__all__ = [
    "UploadError",
    "ParseError",
    "TransportError",
    "ApiError",
    "UnrecognizedEnvelopeError",
    "InvalidTransitionError",
    "SubmissionCancelled",
    "JobFailedError",
]


class UploadError(Exception):
    """Base exception for the upload pipeline."""


class ParseError(UploadError):
    """Raised when the delimited source cannot be read or decoded."""


class TransportError(UploadError):
    """Network failure or non-2xx response without a usable error body."""


class ApiError(TransportError):
    """Non-2xx response carrying a JSON error body."""

    def __init__(self, status_code: int, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error

    def __str__(self) -> str:
        return f"{self.message} (status={self.status_code})"


class UnrecognizedEnvelopeError(UploadError):
    """Response body did not match any known envelope shape."""


class InvalidTransitionError(UploadError):
    """Controller action attempted from a state that does not allow it."""


class SubmissionCancelled(UploadError):
    """Submission was cancelled; any late response has been discarded."""


class JobFailedError(UploadError):
    """Asynchronous bulk job reported failure or never completed."""
