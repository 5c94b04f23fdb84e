from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import UnrecognizedEnvelopeError

"""Response envelope decoding.

The platform API does not wrap list responses uniformly: some endpoints return
``{data: {data: [...]}}``, others ``{data: [...]}``, ``{collections: [...]}`` or
a bare array. Known shapes are tried in priority order and anything else is an
explicit error rather than an empty list, so contract breaks are not masked.
"""

__all__ = [
    "EnvelopeShape",
    "Envelope",
    "unwrap_list",
    "unwrap_object",
]


class EnvelopeShape(Enum):
    NESTED_DATA = "data.data"
    DATA = "data"
    COLLECTIONS = "collections"
    BARE_LIST = "list"


@dataclass(frozen=True)
class Envelope:
    shape: EnvelopeShape
    items: list[Any]


def unwrap_list(payload: Any) -> Envelope:
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            return Envelope(EnvelopeShape.NESTED_DATA, list(data["data"]))
        if isinstance(data, list):
            return Envelope(EnvelopeShape.DATA, list(data))
        if isinstance(payload.get("collections"), list):
            return Envelope(EnvelopeShape.COLLECTIONS, list(payload["collections"]))
    elif isinstance(payload, list):
        return Envelope(EnvelopeShape.BARE_LIST, list(payload))
    raise UnrecognizedEnvelopeError(f"unrecognized list response shape: {_describe(payload)}")


def unwrap_object(payload: Any, expected_keys: Iterable[str]) -> dict[str, Any]:
    """Return the object carrying any of ``expected_keys``.

    ``{data: {...}}`` is preferred over a bare object.
    """
    keys = tuple(expected_keys)
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict) and any(k in data for k in keys):
            return data
        if any(k in payload for k in keys):
            return payload
    raise UnrecognizedEnvelopeError(
        f"unrecognized response shape (expected one of {list(keys)}): {_describe(payload)}"
    )


def _describe(payload: Any) -> str:
    if isinstance(payload, dict):
        return f"object with keys {sorted(map(str, payload))}"
    return type(payload).__name__
