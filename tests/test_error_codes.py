"""
Tests for the error-code lookup tables.
"""
import pytest

from paytr_payments import describe_error
from paytr_payments.core.error_codes import ERROR_CATEGORIES


def test_known_callback_code():
    assert describe_error("6") == "The customer abandoned the payment and left the payment page."


def test_known_refund_code():
    assert describe_error("009", "refund") == "Total refund amount cannot exceed the payment amount."


def test_known_transfer_code():
    assert describe_error("BLK", "transfer").startswith("The transaction is blocked")


def test_integer_code_is_accepted():
    assert describe_error(99, "callback") == "Transaction failed: technical integration error."


def test_unknown_code():
    description = describe_error("999", "refund")
    assert description == "Unknown error code: 999"


def test_unknown_category():
    with pytest.raises(ValueError):
        describe_error("1", "marketplace")


def test_four_categories():
    assert sorted(ERROR_CATEGORIES) == ["callback", "order_status", "refund", "transfer"]
