"""
Parameter checks performed before anything is signed or sent.

Every helper raises :class:`ValidationError` instead of coercing bad input.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple, Union

from .canonical import to_decimal, to_minor_units
from .constants import (
    CARD_TYPES,
    MAX_INSTALLMENT_COUNT,
    MAX_TRANSACTION_LOG_DAYS,
    SUPPORTED_CURRENCIES,
)
from .errors import ValidationError
from .models import Amount, CardInfo, PaymentOptions

__all__ = [
    "require_text",
    "validate_amount",
    "validate_bin_number",
    "validate_card_info",
    "validate_date_range",
    "validate_email",
    "validate_payment_options",
]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_DIGITS_RE = re.compile(r"^\d+$")


def require_text(value: object, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field_name, "must be a non-empty string")
    return value


def validate_email(email: object) -> str:
    if not isinstance(email, str) or not _EMAIL_RE.match(email):
        raise ValidationError("email", f"'{email}' is not a valid e-mail address")
    return email


def validate_amount(amount: Amount, field_name: str) -> Decimal:
    """Ensure ``amount`` is a finite number that is still positive in minor units."""
    try:
        value = to_decimal(amount)
    except (TypeError, ValueError) as exc:
        raise ValidationError(field_name, str(exc)) from exc

    try:
        minor_units = to_minor_units(value)
    except InvalidOperation as exc:
        raise ValidationError(field_name, "is too large") from exc

    if value <= 0 or minor_units == "0":
        raise ValidationError(field_name, "must be greater than zero")
    return value


def validate_bin_number(bin_number: object) -> str:
    if (
        not isinstance(bin_number, str)
        or not _DIGITS_RE.match(bin_number)
        or len(bin_number) not in (6, 8)
    ):
        raise ValidationError("bin_number", "must be the first 6 or 8 digits of the card")
    return bin_number


def validate_card_info(card: CardInfo) -> CardInfo:
    if not isinstance(card.cc_owner, str) or len(card.cc_owner.strip()) < 3:
        raise ValidationError("cc_owner", "must contain at least 3 characters")

    number = card.card_number
    if not isinstance(number, str) or not _DIGITS_RE.match(number) or not 13 <= len(number) <= 19:
        raise ValidationError("card_number", "must be 13 to 19 digits")

    month = card.expiry_month
    if (
        not isinstance(month, str)
        or len(month) != 2
        or not _DIGITS_RE.match(month)
        or not 1 <= int(month) <= 12
    ):
        raise ValidationError("expiry_month", "must be two digits between 01 and 12")

    year = card.expiry_year
    if not isinstance(year, str) or len(year) != 2 or not _DIGITS_RE.match(year):
        raise ValidationError("expiry_year", "must be two digits")

    cvv = card.cvv
    if not isinstance(cvv, str) or not _DIGITS_RE.match(cvv) or len(cvv) not in (3, 4):
        raise ValidationError("cvv", "must be 3 or 4 digits")
    return card


def validate_payment_options(options: PaymentOptions) -> PaymentOptions:
    require_text(options.merchant_oid, "merchant_oid")
    validate_email(options.email)
    validate_amount(options.payment_amount, "payment_amount")

    if options.currency not in SUPPORTED_CURRENCIES:
        raise ValidationError(
            "currency", f"must be one of {sorted(SUPPORTED_CURRENCIES)}, got '{options.currency}'"
        )

    count = options.installment_count
    if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= MAX_INSTALLMENT_COUNT:
        raise ValidationError(
            "installment_count", f"must be an integer between 0 and {MAX_INSTALLMENT_COUNT}"
        )

    if options.card_type and options.card_type not in CARD_TYPES:
        raise ValidationError("card_type", f"unknown card brand '{options.card_type}'")

    if not options.basket_items:
        raise ValidationError("basket_items", "must contain at least one item")
    for index, item in enumerate(options.basket_items):
        require_text(item.name, f"basket_items[{index}].name")
        validate_amount(item.price, f"basket_items[{index}].price")
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity < 1:
            raise ValidationError(f"basket_items[{index}].quantity", "must be a positive integer")

    require_text(options.user.name, "user.name")
    require_text(options.user.address, "user.address")
    require_text(options.user.phone, "user.phone")
    require_text(options.merchant_ok_url, "merchant_ok_url")
    require_text(options.merchant_fail_url, "merchant_fail_url")

    if options.card_info is not None:
        validate_card_info(options.card_info)
    return options


def _as_datetime(value: Union[datetime, date], field_name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise ValidationError(field_name, "must be a date or datetime")


def validate_date_range(
    start: Union[datetime, date],
    end: Union[datetime, date],
    *,
    max_days: Optional[int] = MAX_TRANSACTION_LOG_DAYS,
) -> Tuple[datetime, datetime]:
    start_dt = _as_datetime(start, "start_date")
    end_dt = _as_datetime(end, "end_date")
    if (start_dt.tzinfo is None) != (end_dt.tzinfo is None):
        raise ValidationError("end_date", "cannot mix timezone-aware and naive datetimes")
    if end_dt < start_dt:
        raise ValidationError("end_date", "must not be earlier than start_date")
    if max_days is not None and end_dt - start_dt > timedelta(days=max_days):
        raise ValidationError("end_date", f"range must not exceed {max_days} days")
    return start_dt, end_dt
