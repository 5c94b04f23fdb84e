from __future__ import annotations

from dataclasses import dataclass

from .rows import RowValidator, validate_customer, validate_invoice, validate_street

"""Upload profiles: one per kind of bulk upload.

A profile ties together the template column order, the row validator, and how
the validated batch is sent (payload key, endpoint, result mode).
"""

__all__ = [
    "RESULT_COUNTS",
    "RESULT_JOB",
    "RecordProfile",
    "CUSTOMERS",
    "STREETS",
    "INVOICES",
    "PROFILES",
    "get_profile",
]

# Server answers synchronously with {successCount, failedCount, errors}
RESULT_COUNTS = "counts"
# Server answers with a job id that must be polled until completion
RESULT_JOB = "job"


@dataclass(frozen=True)
class RecordProfile:
    name: str
    columns: tuple[str, ...]  # template column order
    sample_rows: tuple[tuple[str, ...], ...]
    validator: RowValidator
    payload_key: str  # body key holding the record list
    endpoint: str
    result_mode: str = RESULT_COUNTS
    requires_ward: bool = False


CUSTOMERS = RecordProfile(
    name="customers",
    columns=("fullName", "email", "phone", "address", "city", "state", "lga", "previousDebt"),
    sample_rows=(
        (
            "Jane Smith",
            "jane.smith@example.com",
            "'08123456789",  # leading ' keeps spreadsheet apps from dropping the 0
            "456 Oak Avenue, Victoria Island",
            "Lagos",
            "Lagos",
            "Lagos Island",
            "10000",
        ),
    ),
    validator=validate_customer,
    payload_key="customers",
    endpoint="/customers/bulk-upload",
)

STREETS = RecordProfile(
    name="streets",
    columns=("name", "description"),
    sample_rows=(
        ("Main Street", "Central business district"),
        ("Oak Avenue", "Residential area"),
    ),
    validator=validate_street,
    payload_key="streets",
    endpoint="/streets/bulk-upload",
    requires_ward=True,
)

INVOICES = RecordProfile(
    name="invoices",
    columns=("accountNumber", "serviceName", "dueDate", "amount", "description"),
    sample_rows=(
        ("CUST531738049694", "Waste Management", "2025-12-15", "5000", "Monthly waste collection"),
        ("CUST-001-2024-000002", "Water Supply", "2025-12-20", "12500", "Monthly water bill"),
        ("CUST-001-2024-000003", "Electricity Bill", "2025-12-25", "", "December electricity"),
    ),
    validator=validate_invoice,
    payload_key="invoices",
    endpoint="/psp/invoices/bulk",
    result_mode=RESULT_JOB,
)

PROFILES: dict[str, RecordProfile] = {p.name: p for p in (CUSTOMERS, STREETS, INVOICES)}


def get_profile(name: str) -> RecordProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"unknown upload kind: {name!r} (expected one of {sorted(PROFILES)})") from None
