from __future__ import annotations

import math
import re
from typing import Any

"""Field normalizers (pure functions, no I/O).

Phone numbers are normalized to the canonical Nigerian form ``234XXXXXXXXXX``.
Shapes outside the known local / subscriber / international forms are rejected
with PhoneFormatError instead of producing a malformed canonical value.
"""

__all__ = [
    "PhoneFormatError",
    "normalize_phone",
    "is_valid_phone",
    "parse_optional_non_negative_number",
    "clean_text",
]

COUNTRY_CODE = "234"
CANONICAL_PHONE_LENGTH = 13

_NON_DIGIT = re.compile(r"\D")


class PhoneFormatError(ValueError):
    """Raised when a phone number cannot be normalized to 234XXXXXXXXXX."""


def normalize_phone(raw: str | None) -> str:
    """Normalize a Nigerian phone number.

    Accepted shapes (after dropping every non-digit, ``+`` included):
    - ``0XXXXXXXXXX`` (11 digits, local trunk prefix) -> leading 0 becomes 234
    - ``234XXXXXXXXXX`` (13 digits) -> unchanged
    - ``XXXXXXXXXX`` (10 digits, bare subscriber number) -> 234 prepended

    Raises:
        PhoneFormatError: for any other shape
    """
    digits = _NON_DIGIT.sub("", raw or "")
    if len(digits) == 11 and digits.startswith("0"):
        return COUNTRY_CODE + digits[1:]
    if len(digits) == CANONICAL_PHONE_LENGTH and digits.startswith(COUNTRY_CODE):
        return digits
    if len(digits) == 10 and not digits.startswith("0"):
        return COUNTRY_CODE + digits
    raise PhoneFormatError(f"unsupported phone number format: {raw!r}")


def is_valid_phone(raw: str | None) -> bool:
    try:
        normalize_phone(raw)
    except PhoneFormatError:
        return False
    return True


def parse_optional_non_negative_number(value: Any, default: float | None = 0) -> float | None:
    """Permissive numeric coercion (fail-open).

    Absent, blank, unparseable, non-finite or negative input yields ``default``
    without raising. Accepted values are returned as float.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    text = str(value).strip()
    if not text:
        return default
    try:
        number = float(text)
    except ValueError:
        return default
    if not math.isfinite(number) or number < 0:
        return default
    return number


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
