"""
Typed parameter objects passed into the request builders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Sequence, Union

from .constants import DEFAULT_CURRENCY, DEFAULT_INSTALLMENT_COUNT

__all__ = [
    "Amount",
    "BasketItem",
    "CardInfo",
    "MerchantCredentials",
    "PaymentOptions",
    "PreparedPayment",
    "RecurringPaymentOptions",
    "SaveCardPaymentOptions",
    "StoredCardPaymentOptions",
    "UserInfo",
]

Amount = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class MerchantCredentials:
    """
    Store credentials issued by the gateway.

    The key and the salt never show up in ``repr`` so that accidental logging
    of a config object does not leak them.
    """

    merchant_id: str
    merchant_key: str = field(repr=False)
    merchant_salt: str = field(repr=False)


@dataclass(frozen=True)
class BasketItem:
    name: str
    price: Amount
    quantity: int = 1


@dataclass(frozen=True)
class UserInfo:
    name: str
    address: str
    phone: str


@dataclass(frozen=True)
class CardInfo:
    """Raw card data for server-side (Direct API) payments. Requires PCI-DSS scope."""

    cc_owner: str
    card_number: str = field(repr=False)
    expiry_month: str
    expiry_year: str
    cvv: str = field(repr=False)

    @property
    def last_four(self) -> str:
        return self.card_number[-4:]


@dataclass(frozen=True)
class PaymentOptions:
    """
    Parameters for a single payment form.

    ``payment_amount`` is expressed in major units (e.g. ``Decimal("100.99")``);
    it is converted to minor units when the form is signed.
    """

    merchant_oid: str
    email: str
    payment_amount: Amount
    basket_items: Sequence[BasketItem]
    user: UserInfo
    merchant_ok_url: str
    merchant_fail_url: str
    currency: str = DEFAULT_CURRENCY
    user_ip: Optional[str] = None
    installment_count: int = DEFAULT_INSTALLMENT_COUNT
    non_3d: bool = False
    card_type: Optional[str] = None
    non3d_test_failed: bool = False
    sync_mode: bool = False
    card_info: Optional[CardInfo] = None


@dataclass(frozen=True)
class SaveCardPaymentOptions:
    """Pay and ask the gateway to store the card, optionally under an existing ``utoken``."""

    payment: PaymentOptions
    utoken: Optional[str] = None


@dataclass(frozen=True)
class StoredCardPaymentOptions:
    payment: PaymentOptions
    utoken: str
    ctoken: str
    require_cvv: Optional[bool] = None


@dataclass(frozen=True)
class RecurringPaymentOptions:
    payment: PaymentOptions
    utoken: str
    ctoken: str


@dataclass(frozen=True)
class PreparedPayment:
    """
    A fully signed payment form.

    ``form_data`` holds the hidden inputs to post to ``form_action``; ``token``
    repeats the signature for convenience.
    """

    form_action: str
    form_data: Dict[str, str]
    token: str
