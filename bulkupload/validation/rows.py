from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..models.records import CustomerRecord, InvoiceRecord, RawRow, StreetRecord
from ..models.validation_error import ValidationError
from ..reference.catalog import is_valid_lga, is_valid_state, normalize_state_key
from .fields import (
    PhoneFormatError,
    clean_text,
    normalize_phone,
    parse_optional_non_negative_number,
)

"""Row validators.

Each validator turns one RawRow into either a validated record or a single
error message. Rules are applied in order and the first failure wins; errors
are not accumulated within a row. Validators are pure and transport-agnostic.
"""

__all__ = [
    "RowValidation",
    "BatchValidation",
    "RowValidator",
    "FIRST_DATA_ROW",
    "validate_customer",
    "validate_street",
    "validate_invoice",
    "validate_rows",
]

# Header is line 1, so the first data row is line 2
FIRST_DATA_ROW = 2


@dataclass(frozen=True)
class RowValidation:
    valid: bool
    record: Any = None
    error: str | None = None

    @staticmethod
    def ok(record: Any) -> RowValidation:
        return RowValidation(valid=True, record=record)

    @staticmethod
    def fail(error: str) -> RowValidation:
        return RowValidation(valid=False, error=error)


@dataclass(frozen=True)
class BatchValidation:
    """Outcome of validating every row of one source, in source order."""
    records: list[Any] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


RowValidator = Callable[[RawRow], RowValidation]


def _cell(row: RawRow, key: str) -> str:
    return clean_text(row.get(key))


def validate_customer(row: RawRow) -> RowValidation:
    full_name = _cell(row, "fullName")
    if not full_name:
        return RowValidation.fail("Full name is required")

    phone = _cell(row, "phone")
    if not phone:
        return RowValidation.fail("Phone number is required")

    state = _cell(row, "state")
    if state and not is_valid_state(state):
        return RowValidation.fail(f"Invalid state: {state}. Must be a valid Nigerian state")

    lga = _cell(row, "lga")
    if state and lga and not is_valid_lga(state, lga):
        return RowValidation.fail(f"Invalid LGA: {lga} for state {state}")

    try:
        canonical_phone = normalize_phone(phone)
    except PhoneFormatError:
        return RowValidation.fail(
            f"Invalid phone number: {phone}. Must be a valid Nigerian phone number"
        )

    return RowValidation.ok(
        CustomerRecord(
            full_name=full_name,
            phone=canonical_phone,
            email=_cell(row, "email"),
            address=_cell(row, "address"),
            state=normalize_state_key(state) if state else "",
            lga=lga,
            city=_cell(row, "city"),  # free text, no catalog check
            previous_debt=parse_optional_non_negative_number(row.get("previousDebt"), default=0),
        )
    )


def validate_street(row: RawRow) -> RowValidation:
    name = _cell(row, "name")
    if not name:
        return RowValidation.fail("Street name is required")
    return RowValidation.ok(StreetRecord(name=name, description=_cell(row, "description") or None))


def validate_invoice(row: RawRow) -> RowValidation:
    account_number = _cell(row, "accountNumber")
    if not account_number:
        return RowValidation.fail("Account number is required")

    service_name = _cell(row, "serviceName")
    if not service_name:
        return RowValidation.fail("Service name is required")

    due_date = _cell(row, "dueDate")
    if not due_date:
        return RowValidation.fail("Due date is required")
    try:
        date.fromisoformat(due_date)
    except ValueError:
        return RowValidation.fail(f"Invalid due date: {due_date}. Expected YYYY-MM-DD")

    return RowValidation.ok(
        InvoiceRecord(
            account_number=account_number,
            service_name=service_name,
            due_date=due_date,
            amount=parse_optional_non_negative_number(row.get("amount"), default=None),
            description=_cell(row, "description"),
        )
    )


def validate_rows(
    rows: Iterable[RawRow],
    validator: RowValidator,
    first_row_number: int = FIRST_DATA_ROW,
    on_row: Callable[[int, bool], None] | None = None,
) -> BatchValidation:
    """Validate every row, keeping source order for both records and errors.

    Args:
        rows: Parsed rows in file order
        validator: Per-row validator (see ``validate_customer`` etc.)
        first_row_number: Line number reported for the first data row
        on_row: Optional callback invoked with (line number, valid) after each row
            (progress display)
    """
    records: list[Any] = []
    errors: list[ValidationError] = []
    total = 0
    for offset, raw in enumerate(rows):
        row_number = first_row_number + offset
        total += 1
        result = validator(raw)
        if result.valid:
            records.append(result.record)
        else:
            errors.append(
                ValidationError(
                    row=row_number,
                    message=result.error or "Invalid row",
                    raw_row=dict(raw),
                )
            )
        if on_row is not None:
            on_row(row_number, result.valid)
    return BatchValidation(records=records, errors=errors, total_rows=total)
