from __future__ import annotations

from enum import Enum

"""UploadState enum for the parse -> preview -> submit lifecycle."""

__all__ = [
    "UploadState",
    "TERMINAL_STATES",
    "BUSY_STATES",
]


class UploadState(Enum):
    """Lifecycle of one upload.

    State transitions:
        idle → parsing → (parse_failed | validation_failed | preview_ready)
        preview_ready → submitting → (submit_succeeded | submit_failed)
        any non-busy state → idle (reset / cancel)
    """
    IDLE = "idle"
    PARSING = "parsing"
    PARSE_FAILED = "parse_failed"
    VALIDATION_FAILED = "validation_failed"
    PREVIEW_READY = "preview_ready"
    SUBMITTING = "submitting"
    SUBMIT_SUCCEEDED = "submit_succeeded"
    SUBMIT_FAILED = "submit_failed"


TERMINAL_STATES = frozenset({
    UploadState.PARSE_FAILED,
    UploadState.VALIDATION_FAILED,
    UploadState.SUBMIT_SUCCEEDED,
    UploadState.SUBMIT_FAILED,
})

BUSY_STATES = frozenset({UploadState.PARSING, UploadState.SUBMITTING})
