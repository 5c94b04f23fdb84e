from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Validated record models for each upload kind.

Records are created once by a row validator from a RawRow, are immutable, and
live only in memory until the batch is submitted or the upload is reset.
``to_payload`` renders the camelCase shape the platform API expects.
"""

__all__ = [
    "RawRow",
    "CustomerRecord",
    "StreetRecord",
    "InvoiceRecord",
]

# Column header -> cell text for one input line
RawRow = dict[str, str]


@dataclass(frozen=True)
class CustomerRecord:
    """Customer to import (``/customers/bulk-upload``)."""
    full_name: str
    phone: str  # canonical 234XXXXXXXXXX
    email: str = ""
    address: str = ""
    state: str = ""  # catalog key, "" when not supplied
    lga: str = ""
    city: str = ""
    previous_debt: float = 0.0  # backlog carried forward

    def to_payload(self) -> dict[str, Any]:
        return {
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "state": self.state,
            "lga": self.lga,
            "city": self.city,
            "previousDebt": self.previous_debt,
        }


@dataclass(frozen=True)
class StreetRecord:
    name: str
    description: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name}
        if self.description:
            payload["description"] = self.description
        return payload


@dataclass(frozen=True)
class InvoiceRecord:
    """Invoice line for the asynchronous bulk invoice job."""
    account_number: str
    service_name: str
    due_date: str  # ISO date YYYY-MM-DD
    amount: float | None = None  # only meaningful for VARIABLE services
    description: str = ""

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "accountNumber": self.account_number,
            "serviceName": self.service_name,
            "dueDate": self.due_date,
            "description": self.description,
        }
        if self.amount is not None:
            payload["amount"] = self.amount
        return payload
