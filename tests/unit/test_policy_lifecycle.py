"""Unit tests for status validation and expiry rules."""

import pytest

from brokerbook.application.services import PolicyLifecycle
from brokerbook.domain.entities import (
    CLEAR,
    CUSTOMER_SCHEMA,
    KEEP,
    PROPERTY_SCHEMA,
    CarData,
    Customer,
    InsuranceData,
    PolicyStatus,
    Property,
    Set,
)
from brokerbook.domain.exceptions import InvalidStatusError

NOW = 1_700_000_000_000


def _customer(due_date=None, status=None) -> Customer:
    return Customer(
        id="eko-1",
        tenant="eko",
        name="Budi",
        car_data=CarData(due_date=due_date),
        status=status,
    )


@pytest.fixture
def lifecycle() -> PolicyLifecycle:
    return PolicyLifecycle(CUSTOMER_SCHEMA)


def test_keep_and_clear_always_pass(lifecycle: PolicyLifecycle):
    assert lifecycle.validate_request(KEEP) is KEEP
    assert lifecycle.validate_request(CLEAR) is CLEAR


def test_customer_may_only_request_cancelled(lifecycle: PolicyLifecycle):
    assert lifecycle.validate_request(Set("Cancelled")) == Set(PolicyStatus.CANCELLED)
    for raw in ("Active", "Expired", "cancelled", "", "null"):
        with pytest.raises(InvalidStatusError):
            lifecycle.validate_request(Set(raw))


def test_property_may_request_active_or_cancelled():
    lifecycle = PolicyLifecycle(PROPERTY_SCHEMA)

    assert lifecycle.validate_request(Set("Active")) == Set(PolicyStatus.ACTIVE)
    assert lifecycle.validate_request(Set("Cancelled")) == Set(PolicyStatus.CANCELLED)
    with pytest.raises(InvalidStatusError):
        lifecycle.validate_request(Set("Expired"))
    assert lifecycle.settable == ["Active", "Cancelled"]


def test_parse_filter_accepts_every_state():
    for status in PolicyStatus:
        assert PolicyLifecycle.parse_filter(status.value) is status
    with pytest.raises(InvalidStatusError):
        PolicyLifecycle.parse_filter("Lapsed")


def test_effective_status(lifecycle: PolicyLifecycle):
    assert lifecycle.effective_status(_customer(), NOW) is PolicyStatus.ACTIVE
    assert lifecycle.effective_status(_customer(due_date=NOW + 1), NOW) is PolicyStatus.ACTIVE
    assert lifecycle.effective_status(_customer(due_date=NOW - 1), NOW) is PolicyStatus.EXPIRED
    assert (
        lifecycle.effective_status(_customer(NOW - 1, PolicyStatus.CANCELLED), NOW)
        is PolicyStatus.CANCELLED
    )


def test_due_for_expiry(lifecycle: PolicyLifecycle):
    assert lifecycle.is_due_for_expiry(_customer(due_date=NOW - 1), NOW)
    assert lifecycle.is_due_for_expiry(_customer(NOW - 1, PolicyStatus.ACTIVE), NOW)
    assert not lifecycle.is_due_for_expiry(_customer(due_date=NOW), NOW)
    assert not lifecycle.is_due_for_expiry(_customer(), NOW)
    assert not lifecycle.is_due_for_expiry(_customer(NOW - 1, PolicyStatus.CANCELLED), NOW)
    assert not lifecycle.is_due_for_expiry(_customer(NOW - 1, PolicyStatus.EXPIRED), NOW)


def test_property_expiry_reads_insurance_end_date():
    lifecycle = PolicyLifecycle(PROPERTY_SCHEMA)
    prop = Property(
        id="eko-1",
        tenant="eko",
        owner_name="Dewi",
        insurance_data=InsuranceData(start_date=NOW - 10, end_date=NOW - 1),
    )

    assert lifecycle.is_due_for_expiry(prop, NOW)
    assert lifecycle.effective_status(prop, NOW) is PolicyStatus.EXPIRED
