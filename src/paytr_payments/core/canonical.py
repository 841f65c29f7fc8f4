"""
Canonical token strings for every signed gateway operation.

Each operation signs a different, fixed sequence of field values. The values
are concatenated without separators and, for every operation except callback
verification, followed by the merchant salt. One frozen dataclass per
operation holds exactly the fields its sequence needs, so the order below is
the whole protocol:

====================  ==========================================================
Operation             Sequence
====================  ==========================================================
payment form family   merchant_id, user_ip, merchant_oid, email, amount (minor
                      units), "card", installment_count, currency, test_mode,
                      non_3d, salt
callback              merchant_oid, salt, status, total_amount
BIN query             bin_number, merchant_id, salt
refund                merchant_id, merchant_oid, return_amount ("50.00"), salt
transaction log       merchant_id, start_date, end_date, salt
list cards            utoken, salt
delete card           ctoken, utoken, salt
order status          merchant_id, merchant_oid, salt
installment rates     merchant_id, request_id, salt
====================  ==========================================================
"""

from __future__ import annotations

import json
import secrets
import string
import time
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import ClassVar, Dict, Iterable, NewType, Optional, Tuple, Type, Union

from .constants import PAYMENT_TYPE, OperationKind
from .models import Amount, BasketItem, MerchantCredentials

__all__ = [
    "BinQueryTokenFields",
    "CallbackTokenFields",
    "CanonicalString",
    "DeleteCardTokenFields",
    "InstallmentRatesTokenFields",
    "ListCardsTokenFields",
    "OrderStatusTokenFields",
    "PaymentTokenFields",
    "RefundTokenFields",
    "TokenFields",
    "TransactionLogTokenFields",
    "canonicalize",
    "encode_bool",
    "format_basket",
    "format_date",
    "generate_request_id",
    "to_decimal",
    "to_decimal_string",
    "to_minor_units",
]

CanonicalString = NewType("CanonicalString", str)

_CENTS = Decimal("0.01")
_UNITS = Decimal("1")
_REQUEST_ID_ALPHABET = string.digits + string.ascii_lowercase


def to_decimal(amount: Amount) -> Decimal:
    """
    Convert ``amount`` to :class:`Decimal` without binary float artefacts.

    Floats go through their shortest ``repr`` so ``100.005`` stays
    ``Decimal("100.005")`` instead of ``100.00499999...``.
    """
    if isinstance(amount, bool):
        raise TypeError("Amounts must be numeric, not bool")
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, float):
        value = Decimal(repr(amount))
    elif isinstance(amount, int):
        value = Decimal(amount)
    elif isinstance(amount, str):
        try:
            value = Decimal(amount.strip())
        except InvalidOperation as exc:
            raise ValueError(f"'{amount}' is not a valid decimal amount") from exc
    else:
        raise TypeError(f"Unsupported amount type {type(amount).__name__}")

    if not value.is_finite():
        raise ValueError(f"Amount {amount} is not finite")
    return value


def to_minor_units(amount: Amount) -> str:
    """
    Render a major-unit amount as an integer count of minor units.

    Rounding is half-up on the decimal value: ``100.99 -> "10099"``,
    ``0.1 -> "10"``, ``100.005 -> "10001"``.
    """
    scaled = (to_decimal(amount) * 100).quantize(_UNITS, rounding=ROUND_HALF_UP)
    return str(int(scaled))


def to_decimal_string(amount: Amount) -> str:
    """Render ``amount`` with exactly two decimals, rounding half-up."""
    return str(to_decimal(amount).quantize(_CENTS, rounding=ROUND_HALF_UP))


def encode_bool(value: Optional[bool]) -> str:
    return "1" if value else "0"


def format_date(value: Union[datetime, date]) -> str:
    """Format as ``YYYY-MM-DD HH:MM:SS``; plain dates are taken at midnight."""
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return value.strftime("%Y-%m-%d %H:%M:%S")


def format_basket(items: Iterable[BasketItem]) -> str:
    """
    Serialise basket items as a compact JSON array of ``[name, price, quantity]``.

    Numeric prices get two decimals; string prices are passed through as given.
    """
    rows = []
    for item in items:
        price = item.price if isinstance(item.price, str) else to_decimal_string(item.price)
        rows.append([item.name, price, item.quantity])
    return json.dumps(rows, ensure_ascii=False, separators=(",", ":"))


def generate_request_id(*, now_ms: Optional[int] = None) -> str:
    """Millisecond timestamp followed by seven random base36 characters."""
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    suffix = "".join(secrets.choice(_REQUEST_ID_ALPHABET) for _ in range(7))
    return f"{now_ms}{suffix}"


class TokenFields:
    """Base for the per-operation field variants."""

    appends_salt: ClassVar[bool] = True

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        raise NotImplementedError


@dataclass(frozen=True)
class PaymentTokenFields(TokenFields):
    merchant_oid: str
    email: str
    payment_amount: str
    currency: str
    user_ip: Optional[str] = None
    installment_count: int = 0
    test_mode: bool = False
    non_3d: bool = False

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (
            credentials.merchant_id,
            self.user_ip or "",
            self.merchant_oid,
            self.email,
            self.payment_amount,
            PAYMENT_TYPE,
            str(self.installment_count),
            self.currency,
            encode_bool(self.test_mode),
            encode_bool(self.non_3d),
        )


@dataclass(frozen=True)
class CallbackTokenFields(TokenFields):
    # The salt sits in the middle of this sequence instead of at the end.
    appends_salt: ClassVar[bool] = False

    merchant_oid: str
    status: str
    total_amount: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (
            self.merchant_oid,
            credentials.merchant_salt,
            self.status,
            self.total_amount,
        )


@dataclass(frozen=True)
class BinQueryTokenFields(TokenFields):
    bin_number: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (self.bin_number, credentials.merchant_id)


@dataclass(frozen=True)
class RefundTokenFields(TokenFields):
    merchant_oid: str
    return_amount: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (credentials.merchant_id, self.merchant_oid, self.return_amount)


@dataclass(frozen=True)
class TransactionLogTokenFields(TokenFields):
    start_date: str
    end_date: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (credentials.merchant_id, self.start_date, self.end_date)


@dataclass(frozen=True)
class ListCardsTokenFields(TokenFields):
    utoken: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (self.utoken,)


@dataclass(frozen=True)
class DeleteCardTokenFields(TokenFields):
    ctoken: str
    utoken: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (self.ctoken, self.utoken)


@dataclass(frozen=True)
class OrderStatusTokenFields(TokenFields):
    merchant_oid: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (credentials.merchant_id, self.merchant_oid)


@dataclass(frozen=True)
class InstallmentRatesTokenFields(TokenFields):
    request_id: str

    def parts(self, credentials: MerchantCredentials) -> Tuple[str, ...]:
        return (credentials.merchant_id, self.request_id)


_VARIANT_BY_KIND: Dict[OperationKind, Type[TokenFields]] = {
    OperationKind.PREPARE_PAYMENT: PaymentTokenFields,
    OperationKind.SAVE_CARD_PAYMENT: PaymentTokenFields,
    OperationKind.STORED_CARD_PAYMENT: PaymentTokenFields,
    OperationKind.RECURRING_PAYMENT: PaymentTokenFields,
    OperationKind.DIRECT_PAYMENT: PaymentTokenFields,
    OperationKind.VERIFY_CALLBACK: CallbackTokenFields,
    OperationKind.BIN_QUERY: BinQueryTokenFields,
    OperationKind.REFUND: RefundTokenFields,
    OperationKind.TRANSACTION_LOG: TransactionLogTokenFields,
    OperationKind.LIST_CARDS: ListCardsTokenFields,
    OperationKind.DELETE_CARD: DeleteCardTokenFields,
    OperationKind.ORDER_STATUS: OrderStatusTokenFields,
    OperationKind.INSTALLMENT_RATES: InstallmentRatesTokenFields,
}


def canonicalize(
    kind: OperationKind,
    fields: TokenFields,
    credentials: MerchantCredentials,
) -> CanonicalString:
    """
    Build the exact string that is signed for ``kind``.

    Passing a field variant that belongs to another operation, or leaving a
    required value unset, raises :class:`TypeError`.
    """
    expected = _VARIANT_BY_KIND[kind]
    if not isinstance(fields, expected):
        raise TypeError(
            f"{kind.value} expects {expected.__name__}, got {type(fields).__name__}"
        )

    parts = fields.parts(credentials)
    for position, value in enumerate(parts):
        if not isinstance(value, str):
            raise TypeError(
                f"{kind.value} field #{position} must be a string, got {type(value).__name__}"
            )

    canonical = "".join(parts)
    if fields.appends_salt:
        canonical += credentials.merchant_salt
    return CanonicalString(canonical)
