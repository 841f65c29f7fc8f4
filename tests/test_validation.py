"""
Tests for parameter validation.
"""
import dataclasses
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from paytr_payments import BasketItem, CardInfo, UserInfo, ValidationError
from paytr_payments.core.constants import DEFAULT_CURRENCY, DEFAULT_INSTALLMENT_COUNT
from paytr_payments.core.validation import (
    validate_amount,
    validate_bin_number,
    validate_card_info,
    validate_date_range,
    validate_email,
    validate_payment_options,
)

CARD = CardInfo(
    cc_owner="Ayse Yilmaz",
    card_number="4355084355084358",
    expiry_month="12",
    expiry_year="30",
    cvv="000",
)


class TestAmount:

    @pytest.mark.parametrize("amount", [0, -1, "0.00", 0.004, "abc", True, None])
    def test_rejected(self, amount):
        with pytest.raises(ValidationError) as exc_info:
            validate_amount(amount, "payment_amount")
        assert exc_info.value.field_name == "payment_amount"

    @pytest.mark.parametrize("amount", [1, 0.01, "100.99"])
    def test_accepted(self, amount):
        assert validate_amount(amount, "payment_amount") > 0


@pytest.mark.parametrize("email", ["buyer@example.com", "a.b+c@shop.com.tr"])
def test_valid_email(email):
    assert validate_email(email) == email


@pytest.mark.parametrize("email", ["", "buyer", "buyer@", "buyer@example", "a b@example.com", None])
def test_invalid_email(email):
    with pytest.raises(ValidationError):
        validate_email(email)


@pytest.mark.parametrize("bin_number", ["979203", "97920312"])
def test_valid_bin(bin_number):
    assert validate_bin_number(bin_number) == bin_number


@pytest.mark.parametrize("bin_number", ["97920", "9792031", "97920a", 979203])
def test_invalid_bin(bin_number):
    with pytest.raises(ValidationError):
        validate_bin_number(bin_number)


class TestCardInfo:

    def test_valid(self):
        assert validate_card_info(CARD) is CARD
        assert CARD.last_four == "4358"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("cc_owner", "AY"),
            ("card_number", "4355 0843 5508 4358"),
            ("card_number", "435508435508"),
            ("expiry_month", "13"),
            ("expiry_month", "1"),
            ("expiry_year", "2030"),
            ("cvv", "12"),
            ("cvv", "12345"),
        ],
    )
    def test_invalid(self, field, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_card_info(dataclasses.replace(CARD, **{field: value}))
        assert exc_info.value.field_name == field

    def test_card_number_not_in_repr(self):
        assert "4355084355084358" not in repr(CARD)


class TestPaymentOptions:

    def test_valid(self, payment_options):
        assert validate_payment_options(payment_options) is payment_options

    @pytest.mark.parametrize(
        "changes, field_name",
        [
            ({"merchant_oid": ""}, "merchant_oid"),
            ({"currency": "GBP"}, "currency"),
            ({"installment_count": 13}, "installment_count"),
            ({"installment_count": -1}, "installment_count"),
            ({"installment_count": True}, "installment_count"),
            ({"card_type": "visa"}, "card_type"),
            ({"basket_items": []}, "basket_items"),
            ({"basket_items": [BasketItem(name="", price=1)]}, "basket_items[0].name"),
            ({"basket_items": [BasketItem(name="Item", price=0)]}, "basket_items[0].price"),
            (
                {"basket_items": [BasketItem(name="Item", price=1, quantity=0)]},
                "basket_items[0].quantity",
            ),
            ({"user": UserInfo(name="Ayse", address="", phone="0555")}, "user.address"),
            ({"merchant_ok_url": ""}, "merchant_ok_url"),
        ],
    )
    def test_invalid(self, payment_options, changes, field_name):
        with pytest.raises(ValidationError) as exc_info:
            validate_payment_options(dataclasses.replace(payment_options, **changes))
        assert exc_info.value.field_name == field_name
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_known_card_type(self, payment_options):
        options = dataclasses.replace(payment_options, card_type="bonus", installment_count=6)
        assert validate_payment_options(options) is options


class TestDateRange:

    def test_dates_become_datetimes(self):
        start, end = validate_date_range(date(2024, 1, 1), date(2024, 1, 4))
        assert start == datetime(2024, 1, 1)
        assert end == datetime(2024, 1, 4)

    def test_range_too_long(self):
        with pytest.raises(ValidationError):
            validate_date_range(datetime(2024, 1, 1), datetime(2024, 1, 4, 0, 0, 1))

    def test_end_before_start(self):
        with pytest.raises(ValidationError):
            validate_date_range(date(2024, 1, 2), date(2024, 1, 1))

    def test_limit_can_be_lifted(self):
        validate_date_range(date(2024, 1, 1), date(2024, 3, 1), max_days=None)

    def test_wrong_type(self):
        with pytest.raises(ValidationError):
            validate_date_range("2024-01-01", date(2024, 1, 2))


def test_amount_beyond_decimal_precision():
    with pytest.raises(ValidationError) as exc_info:
        validate_amount(Decimal("1e30"), "return_amount")
    assert exc_info.value.field_name == "return_amount"


def test_mixed_timezone_awareness():
    with pytest.raises(ValidationError) as exc_info:
        validate_date_range(
            datetime(2024, 1, 1, tzinfo=timezone.utc), datetime(2024, 1, 2)
        )
    assert exc_info.value.field_name == "end_date"


def test_aware_datetimes_are_accepted():
    start, end = validate_date_range(
        datetime(2024, 1, 1, tzinfo=timezone.utc), datetime(2024, 1, 2, tzinfo=timezone.utc)
    )
    assert end - start == timedelta(days=1)


def test_payment_defaults(payment_options):
    assert payment_options.currency == DEFAULT_CURRENCY == "TL"
    assert payment_options.installment_count == DEFAULT_INSTALLMENT_COUNT == 0
