from __future__ import annotations

from bulkupload.models.records import CustomerRecord, InvoiceRecord, StreetRecord
from bulkupload.validation.rows import (
    validate_customer,
    validate_invoice,
    validate_rows,
    validate_street,
)


def _customer(**overrides):
    row = {
        "fullName": "Jane Doe",
        "phone": "08012345678",
        "email": "",
        "address": "",
        "city": "",
        "state": "Lagos",
        "lga": "Lagos Island",
        "previousDebt": "",
    }
    row.update(overrides)
    return row


def test_valid_customer_builds_normalized_record():
    result = validate_customer(_customer(email=" jane@example.com ", address=" 1 Marina ", city=" Ikoyi "))
    assert result.valid is True
    assert result.error is None
    assert result.record == CustomerRecord(
        full_name="Jane Doe",
        phone="2348012345678",
        email="jane@example.com",
        address="1 Marina",
        state="lagos",
        lga="Lagos Island",
        city="Ikoyi",
        previous_debt=0,
    )


def test_missing_name_is_first_failure():
    # phone also missing: name rule wins
    result = validate_customer(_customer(fullName="  ", phone=""))
    assert result.valid is False
    assert result.error == "Full name is required"


def test_missing_phone():
    result = validate_customer(_customer(phone="   "))
    assert result.error == "Phone number is required"


def test_absent_keys_treated_as_blank():
    assert validate_customer({}).error == "Full name is required"
    assert validate_customer({"fullName": "A"}).error == "Phone number is required"


def test_invalid_state_message():
    result = validate_customer(_customer(state="Atlantis", lga=""))
    assert result.error == "Invalid state: Atlantis. Must be a valid Nigerian state"


def test_invalid_lga_message():
    result = validate_customer(_customer(state="Lagos", lga="Timbuktu"))
    assert result.error == "Invalid LGA: Timbuktu for state Lagos"


def test_state_error_precedes_lga_error():
    result = validate_customer(_customer(state="Atlantis", lga="Timbuktu"))
    assert result.error.startswith("Invalid state:")


def test_lga_without_state_is_unconstrained():
    result = validate_customer(_customer(state="", lga="Anywhere"))
    assert result.valid
    assert result.record.state == ""
    assert result.record.lga == "Anywhere"


def test_uncatalogued_state_accepts_any_lga():
    result = validate_customer(_customer(state="Zamfara", lga="Gusau Somewhere"))
    assert result.valid
    assert result.record.state == "zamfara"


def test_malformed_phone_fails_after_reference_checks():
    result = validate_customer(_customer(phone="12345"))
    assert result.valid is False
    assert result.error == "Invalid phone number: 12345. Must be a valid Nigerian phone number"


def test_previous_debt_permissive_coercion():
    assert validate_customer(_customer(previousDebt="15000")).record.previous_debt == 15000.0
    assert validate_customer(_customer(previousDebt="not-a-number")).record.previous_debt == 0
    assert validate_customer(_customer(previousDebt="-20")).record.previous_debt == 0


def test_customer_payload_shape():
    record = validate_customer(_customer()).record
    assert record.to_payload() == {
        "fullName": "Jane Doe",
        "email": "",
        "phone": "2348012345678",
        "address": "",
        "state": "lagos",
        "lga": "Lagos Island",
        "city": "",
        "previousDebt": 0,
    }


def test_validate_street():
    assert validate_street({"name": " "}).error == "Street name is required"
    ok = validate_street({"name": " Main Street ", "description": " "})
    assert ok.record == StreetRecord(name="Main Street", description=None)
    assert ok.record.to_payload() == {"name": "Main Street"}


def test_validate_invoice_rules_in_order():
    base = {"accountNumber": "CUST1", "serviceName": "Waste Management", "dueDate": "2025-12-15"}
    assert validate_invoice({**base, "accountNumber": ""}).error == "Account number is required"
    assert validate_invoice({**base, "serviceName": ""}).error == "Service name is required"
    assert validate_invoice({**base, "dueDate": ""}).error == "Due date is required"
    assert (
        validate_invoice({**base, "dueDate": "15/12/2025"}).error
        == "Invalid due date: 15/12/2025. Expected YYYY-MM-DD"
    )


def test_validate_invoice_amount_optional():
    base = {"accountNumber": "CUST1", "serviceName": "Waste Management", "dueDate": "2025-12-15"}
    fixed = validate_invoice({**base, "amount": ""}).record
    assert fixed == InvoiceRecord("CUST1", "Waste Management", "2025-12-15", None, "")
    assert "amount" not in fixed.to_payload()
    variable = validate_invoice({**base, "amount": "5000"}).record
    assert variable.to_payload()["amount"] == 5000.0


def test_validate_rows_reports_file_line_numbers():
    rows = [
        _customer(fullName="A"),
        _customer(fullName="B"),
        _customer(fullName=""),  # data row 3 -> file line 4
        _customer(fullName="D"),
    ]
    outcome = validate_rows(rows, validate_customer)
    assert outcome.total_rows == 4
    assert outcome.has_errors
    assert len(outcome.errors) == 1
    err = outcome.errors[0]
    assert err.row == 4
    assert err.message == "Full name is required"
    assert err.raw_row["phone"] == "08012345678"


def test_validate_rows_keeps_order_and_reports_progress():
    seen = []
    rows = [_customer(fullName=n) for n in ("A", "B", "C")]
    outcome = validate_rows(rows, validate_customer, on_row=lambda r, ok: seen.append((r, ok)))
    assert [r.full_name for r in outcome.records] == ["A", "B", "C"]
    assert seen == [(2, True), (3, True), (4, True)]
    assert not outcome.has_errors


def test_validate_rows_mixed_lga_batch_reports_only_bad_row():
    rows = [_customer(lga="Epe"), _customer(lga="Timbuktu")]
    outcome = validate_rows(rows, validate_customer)
    assert [(e.row, e.message) for e in outcome.errors] == [
        (3, "Invalid LGA: Timbuktu for state Lagos")
    ]
