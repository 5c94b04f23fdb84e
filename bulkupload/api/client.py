from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import Any

import requests

from ..errors import ApiError, SubmissionCancelled, TransportError
from .envelope import Envelope, unwrap_list

"""Thin HTTP client for the PSP platform REST API.

Every call is one synchronous request with a bearer token and JSON body. No
automatic retries: a failed request surfaces as TransportError/ApiError and the
operator decides whether to run the upload again.
"""

__all__ = [
    "CancellationToken",
    "ApiClient",
    "DEFAULT_TIMEOUT_SECONDS",
]

DEFAULT_TIMEOUT_SECONDS = 30.0

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation flag shared between the caller and a submission.

    Cancelling before a request is sent prevents it from being sent; cancelling
    while it is in flight makes the client discard the response.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SubmissionCancelled("submission cancelled")


class ApiClient:
    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        json_body: Any = None,
        token: CancellationToken | None = None,
    ) -> Any:
        if token is not None:
            token.raise_if_cancelled()
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                json=json_body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Network error calling {url}: {e}") from e
        if token is not None and token.cancelled:
            logger.debug(f"discarding late response from {url} (cancelled)")
            raise SubmissionCancelled("submission cancelled; late response discarded")
        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: requests.Response) -> Any:
        status = response.status_code
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = None
            if not isinstance(body, dict):
                raise TransportError(f"Server error: {status} {response.reason or ''}".rstrip())
            raise ApiError(
                int(body.get("statusCode") or status),
                str(body.get("message") or f"Request failed with status {status}"),
                body.get("error") or response.reason,
            )
        if status == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(500, "Failed to parse server response", "Invalid JSON") from e

    def submit_batch(
        self,
        endpoint: str,
        payload_key: str,
        records: Sequence[dict[str, Any]],
        *,
        extra: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        """POST the whole ordered batch in one request: ``{payload_key: [...], **extra}``."""
        body: dict[str, Any] = dict(extra or {})
        body[payload_key] = list(records)
        return self._request("POST", endpoint, body, token=token)

    def get_job_status(self, job_id: str, token: CancellationToken | None = None) -> Any:
        return self._request("GET", f"/queue/invoice/{job_id}", token=token)

    def list_collections(self) -> Envelope:
        return unwrap_list(self._request("GET", "/collections"))

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
