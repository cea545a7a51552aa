from __future__ import annotations

from datetime import datetime

from cartfleet._redact import redact_for_log
from cartfleet.models.cart import CartType
from cartfleet.models.customer import Customer


def test_redacts_contact_fields() -> None:
    record = {
        "firstName": "Pat",
        "email": "pat@example.com",
        "Phone": "555-0100",
        "address": "1 Main St",
        "notes": "Call after 5",
        "company": "Doe Events",
    }

    redacted = redact_for_log(record)

    assert redacted == {
        "firstName": "Pat",
        "email": "<redacted>",
        "Phone": "<redacted>",
        "address": "<redacted>",
        "notes": "<redacted>",
        "company": "Doe Events",
    }


def test_empty_sensitive_values_are_kept() -> None:
    assert redact_for_log({"email": "", "notes": None}) == {"email": "", "notes": None}


def test_nested_and_scalar_values() -> None:
    value = {
        "carts": [{"type": CartType.TWO_PASSENGER_GAS, "quantity": 2}],
        "startDate": datetime(2026, 3, 2, 9, 0),
        "customer": {"email": "pat@example.com"},
    }

    redacted = redact_for_log(value)

    assert redacted["carts"] == [{"type": "2-Passenger Gas", "quantity": 2}]
    assert redacted["startDate"] == "2026-03-02 09:00:00"
    assert redacted["customer"] == {"email": "<redacted>"}


def test_long_strings_are_truncated() -> None:
    assert redact_for_log("x" * 20, max_string=5) == "xxxxx…<truncated>"


def test_prefixed_keys_are_matched_by_suffix() -> None:
    redacted = redact_for_log({"customerEmail": "pat@example.com", "billing_address": "1 Main", "phoneBook": "x"})
    assert redacted == {"customerEmail": "<redacted>", "billing_address": "<redacted>", "phoneBook": "x"}


def test_records_are_dumped_in_stored_form(now: datetime) -> None:
    customer = Customer(id="CUST-1", first_name="Pat", last_name="Doe", email="pat@example.com", created_at=now)

    redacted = redact_for_log(customer)

    assert redacted["firstName"] == "Pat"
    assert redacted["email"] == "<redacted>"
    assert redacted["phone"] == ""
    assert redacted["createdAt"] == "2026-03-02T09:00:00"
    assert "company" not in redacted
