from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from ..api.client import ApiClient, CancellationToken
from ..api.envelope import unwrap_object
from ..errors import JobFailedError, UnrecognizedEnvelopeError
from ..models.submission_result import BatchSubmissionResult, ServerRowError, as_int
from ..validation.profiles import RESULT_JOB, RecordProfile

"""Batch submission: send validated records and decode the server's verdict.

Two result modes exist:
- counts: the server answers with ``{successCount, failedCount, errors}``
- job: the server answers with a job id; the job is polled until it reports
  ``completed`` (summary + failed rows) or ``failed``
"""

__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_MAX_POLLS",
    "submit_records",
    "result_from_job",
]

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_MAX_POLLS = 150

logger = logging.getLogger(__name__)


def submit_records(
    client: ApiClient,
    profile: RecordProfile,
    records: Sequence[Any],
    *,
    endpoint: str | None = None,
    extra: dict[str, Any] | None = None,
    token: CancellationToken | None = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    max_polls: int = DEFAULT_MAX_POLLS,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchSubmissionResult:
    """Submit the complete ordered batch in a single request.

    Raises:
        TransportError / ApiError: request failed
        UnrecognizedEnvelopeError: response shape not recognized
        JobFailedError: polled job failed or did not finish within max_polls
        SubmissionCancelled: token cancelled; any late response was discarded
    """
    payload = [r.to_payload() for r in records]
    response = client.submit_batch(
        endpoint or profile.endpoint,
        profile.payload_key,
        payload,
        extra=extra,
        token=token,
    )
    if profile.result_mode == RESULT_JOB:
        job_id = str(unwrap_object(response, ("jobId",))["jobId"])
        logger.info(f"bulk job started job_id={job_id} records={len(payload)}")
        return _poll_job(client, job_id, token, poll_interval, max_polls, sleep)
    data = unwrap_object(response, ("successCount", "failedCount", "errors"))
    return BatchSubmissionResult.from_counts_payload(data)


def _poll_job(
    client: ApiClient,
    job_id: str,
    token: CancellationToken | None,
    poll_interval: float,
    max_polls: int,
    sleep: Callable[[float], None],
) -> BatchSubmissionResult:
    for attempt in range(1, max_polls + 1):
        if token is not None:
            token.raise_if_cancelled()
        status = unwrap_object(client.get_job_status(job_id, token=token), ("state",))
        state = status.get("state")
        logger.debug(f"job_id={job_id} poll={attempt} state={state} progress={status.get('progress')}")
        if state == "completed":
            return result_from_job(status.get("result") or {})
        if state == "failed":
            reason = status.get("failedReason") or status.get("error") or "Bulk upload failed"
            raise JobFailedError(f"job {job_id} failed: {reason}")
        sleep(poll_interval)
    raise JobFailedError(f"job {job_id} did not complete after {max_polls} polls")


def result_from_job(result: Any) -> BatchSubmissionResult:
    """Convert a completed job result (``summary`` + ``failed`` rows).

    Raises:
        UnrecognizedEnvelopeError: result, summary or counts not in the expected shape
    """
    if not isinstance(result, dict):
        raise UnrecognizedEnvelopeError(f"unrecognized job result: {type(result).__name__}")
    summary = result.get("summary") or {}
    failed = result.get("failed") or []
    if not isinstance(summary, dict) or not isinstance(failed, list):
        raise UnrecognizedEnvelopeError("unrecognized job result: summary/failed have the wrong type")
    errors: list[ServerRowError] = []
    for item in failed:
        if not isinstance(item, dict):
            continue
        context = {k: v for k, v in item.items() if k not in ("row", "error")}
        errors.append(
            ServerRowError(
                row=as_int(item.get("row"), -1),
                message=str(item.get("error") or "Unknown error"),
                context=context,
            )
        )
    return BatchSubmissionResult(
        success_count=_count(summary, "successful", 0),
        failed_count=_count(summary, "failed", len(errors)),
        errors=errors,
    )


def _count(summary: dict[str, Any], key: str, default: int) -> int:
    value = summary.get(key)
    if value is None:
        return default
    count = as_int(value, -1)
    if count < 0:
        raise UnrecognizedEnvelopeError(f"unrecognized job result: summary.{key}={value!r}")
    return count
