from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..api.client import ApiClient, CancellationToken
from ..csvfile.reader import SourceData, read_csv_file, read_csv_text
from ..errors import (
    InvalidTransitionError,
    ParseError,
    SubmissionCancelled,
    UploadError,
)
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import (
    CLIENT_VALIDATION,
    PARSE_ERROR,
    SERVER_REJECTED,
    TRANSPORT_ERROR,
    ErrorRecord,
)
from ..models.submission_result import BatchSubmissionResult
from ..models.upload_state import BUSY_STATES, UploadState
from ..models.validation_error import ValidationError
from ..validation.profiles import RecordProfile
from ..validation.rows import validate_rows
from .progress import ProgressTracker
from .submission import DEFAULT_MAX_POLLS, DEFAULT_POLL_INTERVAL_SECONDS, submit_records

"""Parse -> validate -> preview -> submit controller.

One controller instance drives one upload at a time:

    IDLE --load--> PARSING --> PARSE_FAILED | VALIDATION_FAILED | PREVIEW_READY
    PREVIEW_READY --confirm--> SUBMITTING --> SUBMIT_SUCCEEDED | SUBMIT_FAILED
    any non-busy state --reset/cancel--> IDLE

The batch is all-or-nothing on the client side: a single invalid row blocks the
whole submission and no records are exposed for preview. Submission only
happens on an explicit ``confirm``.
"""

__all__ = [
    "UploadController",
]

logger = logging.getLogger(__name__)


class UploadController:
    def __init__(
        self,
        profile: RecordProfile,
        client: ApiClient | None = None,
        *,
        endpoint: str | None = None,
        extra: dict[str, Any] | None = None,
        error_log: ErrorLogBuffer | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_polls: int = DEFAULT_MAX_POLLS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.profile = profile
        self.client = client
        self.endpoint = endpoint or profile.endpoint
        self.extra = dict(extra or {})
        self.error_log = error_log if error_log is not None else ErrorLogBuffer()
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._sleep = sleep

        self._state = UploadState.IDLE
        self._clear()

    def _clear(self) -> None:
        self.source: SourceData | None = None
        self._records: list[Any] = []
        self._errors: list[ValidationError] = []
        self.result: BatchSubmissionResult | None = None
        self.failure_message: str | None = None
        self.total_rows = 0
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None
        self._token: CancellationToken | None = None

    # ---- state ---------------------------------------------------------
    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def can_load(self) -> bool:
        """Trigger control enabled only while idle."""
        return self._state is UploadState.IDLE

    @property
    def records(self) -> list[Any]:
        """Validated records, exposed only once the whole batch passed."""
        if self._state in (
            UploadState.PREVIEW_READY,
            UploadState.SUBMITTING,
            UploadState.SUBMIT_SUCCEEDED,
            UploadState.SUBMIT_FAILED,
        ):
            return list(self._records)
        return []

    @property
    def errors(self) -> list[ValidationError]:
        return list(self._errors)

    @property
    def source_name(self) -> str:
        return self.source.name if self.source is not None else "-"

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time or datetime.now(UTC)
        return (end - self.start_time).total_seconds()

    def _require(self, *allowed: UploadState, action: str) -> None:
        if self._state not in allowed:
            raise InvalidTransitionError(
                f"cannot {action} while {self._state.value}"
            )

    # ---- parse & validate ---------------------------------------------
    def load(self, path: Path) -> UploadState:
        """Parse and validate a CSV file, stopping at the preview gate."""
        return self._load(lambda: read_csv_file(path), path.name)

    def load_text(self, text: str, name: str = "<text>") -> UploadState:
        return self._load(lambda: read_csv_text(text, name=name), name)

    def _load(self, read: Callable[[], SourceData], name: str) -> UploadState:
        self._require(UploadState.IDLE, action="load a file")
        self._state = UploadState.PARSING
        self.start_time = datetime.now(UTC)
        try:
            return self._parse_and_validate(read, name)
        except Exception as e:
            # PARSING must never outlive the call
            return self._fail_parse(name, f"Unexpected error while loading {name}: {e}")

    def _parse_and_validate(self, read: Callable[[], SourceData], name: str) -> UploadState:
        try:
            source = read()
            if not source.rows:
                raise ParseError(f"No valid {self.profile.name} data found in file")
        except ParseError as e:
            return self._fail_parse(name, str(e))

        self.source = source
        self.total_rows = len(source.rows)
        logger.info(f"parsed {self.total_rows} row(s) from {source.name}")

        with ProgressTracker(self.total_rows) as progress:
            outcome = validate_rows(
                source.rows,
                self.profile.validator,
                on_row=lambda _row, valid: progress.advance(valid),
            )

        self.end_time = datetime.now(UTC)
        if outcome.has_errors:
            self._errors = list(outcome.errors)
            self._records = []
            for err in self._errors:
                logger.error(f"row {err.row}: {err.message}")
            self.error_log.extend([
                ErrorRecord.create(source.name, err.row, CLIENT_VALIDATION, err.message)
                for err in self._errors
            ])
            logger.error(
                f"{len(self._errors)} row(s) failed validation. Please review and fix errors."
            )
            self._state = UploadState.VALIDATION_FAILED
            return self._state

        self._records = list(outcome.records)
        logger.info(
            f"{len(self._records)} {self.profile.name} record(s) ready for upload. "
            "Please review and submit."
        )
        self._state = UploadState.PREVIEW_READY
        return self._state

    def _fail_parse(self, name: str, message: str) -> UploadState:
        self.end_time = datetime.now(UTC)
        self.failure_message = message
        self._records = []
        logger.error(f"parse: {message}")
        self.error_log.append(ErrorRecord.create(name, -1, PARSE_ERROR, message))
        self._state = UploadState.PARSE_FAILED
        return self._state

    # ---- submit --------------------------------------------------------
    def confirm(self, token: CancellationToken | None = None) -> UploadState:
        """Submit the previewed batch in one request (explicit operator action)."""
        self._require(UploadState.PREVIEW_READY, action="submit")
        if self.client is None:
            raise UploadError("no API client configured for submission")

        self._token = token if token is not None else CancellationToken()
        self._state = UploadState.SUBMITTING
        logger.info(f"submitting {len(self._records)} record(s) to {self.endpoint}")
        try:
            result = submit_records(
                self.client,
                self.profile,
                self._records,
                endpoint=self.endpoint,
                extra=self.extra,
                token=self._token,
                poll_interval=self.poll_interval,
                max_polls=self.max_polls,
                sleep=self._sleep,
            )
        except SubmissionCancelled:
            logger.info("submission cancelled; response discarded")
            self._state = UploadState.IDLE
            self._clear()
            return self._state
        except UploadError as e:
            return self._fail_submit(str(e))
        except Exception as e:
            # SUBMITTING must never outlive the call
            return self._fail_submit(f"Unexpected error while submitting: {e}")

        self.end_time = datetime.now(UTC)
        self.result = result
        for err in result.errors:
            self.error_log.append(
                ErrorRecord.create(self.source_name, err.row, SERVER_REJECTED, err.message)
            )
        if result.all_succeeded:
            logger.info(f"Successfully uploaded {result.success_count} {self.profile.name}")
        else:
            logger.warning(
                f"Uploaded {result.success_count} {self.profile.name}, {result.failed_count} failed"
            )
        self._state = UploadState.SUBMIT_SUCCEEDED
        return self._state

    def _fail_submit(self, message: str) -> UploadState:
        self.end_time = datetime.now(UTC)
        self.failure_message = message
        logger.error(f"submit: {message}")
        self.error_log.append(
            ErrorRecord.create(self.source_name, -1, TRANSPORT_ERROR, message)
        )
        self._state = UploadState.SUBMIT_FAILED
        return self._state

    # ---- cancel / reset -----------------------------------------------
    def cancel(self) -> None:
        """Close the upload.

        While submitting, the in-flight submission's token is cancelled so its
        response is discarded when it arrives; otherwise this is ``reset``.
        """
        if self._state is UploadState.SUBMITTING and self._token is not None:
            self._token.cancel()
            return
        self.reset()

    def reset(self) -> None:
        if self._state in BUSY_STATES:
            raise InvalidTransitionError(f"cannot reset while {self._state.value}")
        self._clear()
        self._state = UploadState.IDLE
