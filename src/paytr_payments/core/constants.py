"""
Fixed protocol constants: operation kinds, gateway endpoints and defaults.

None of these are configuration. The gateway mandates the URLs and the field
names, so they live here as read-only module data.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

__all__ = [
    "API_KINDS",
    "BASE_URL",
    "CARD_TYPES",
    "DEFAULT_CURRENCY",
    "DEFAULT_INSTALLMENT_COUNT",
    "DEFAULT_LANGUAGE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ENDPOINTS",
    "FORM_HEADERS",
    "MAX_INSTALLMENT_COUNT",
    "MAX_TRANSACTION_LOG_DAYS",
    "OperationKind",
    "PAYMENT_FORM_KINDS",
    "PAYMENT_TYPE",
    "SUPPORTED_CURRENCIES",
    "SUPPORTED_LANGUAGES",
    "TOKEN_FIELD",
    "endpoint_for",
]


class OperationKind(str, Enum):
    PREPARE_PAYMENT = "prepare_payment"
    SAVE_CARD_PAYMENT = "save_card_payment"
    STORED_CARD_PAYMENT = "stored_card_payment"
    RECURRING_PAYMENT = "recurring_payment"
    VERIFY_CALLBACK = "verify_callback"
    BIN_QUERY = "bin_query"
    REFUND = "refund"
    TRANSACTION_LOG = "transaction_log"
    LIST_CARDS = "list_cards"
    DELETE_CARD = "delete_card"
    ORDER_STATUS = "order_status"
    INSTALLMENT_RATES = "installment_rates"
    DIRECT_PAYMENT = "direct_payment"


BASE_URL = "https://www.paytr.com"

_PAYMENT_FORM_URL = f"{BASE_URL}/odeme"

ENDPOINTS: Mapping[OperationKind, str] = MappingProxyType(
    {
        OperationKind.PREPARE_PAYMENT: _PAYMENT_FORM_URL,
        OperationKind.SAVE_CARD_PAYMENT: _PAYMENT_FORM_URL,
        OperationKind.STORED_CARD_PAYMENT: _PAYMENT_FORM_URL,
        OperationKind.RECURRING_PAYMENT: _PAYMENT_FORM_URL,
        OperationKind.DIRECT_PAYMENT: _PAYMENT_FORM_URL,
        OperationKind.BIN_QUERY: f"{BASE_URL}/odeme/api/bin-detail",
        OperationKind.REFUND: f"{BASE_URL}/odeme/iade",
        OperationKind.TRANSACTION_LOG: f"{BASE_URL}/rapor/islem-dokumu",
        OperationKind.LIST_CARDS: f"{BASE_URL}/odeme/capi/list",
        OperationKind.DELETE_CARD: f"{BASE_URL}/odeme/capi/delete",
        OperationKind.ORDER_STATUS: f"{BASE_URL}/odeme/durum-sorgu",
        OperationKind.INSTALLMENT_RATES: f"{BASE_URL}/odeme/taksit-oranlari",
    }
)

# Kinds whose field set is the browser/server payment form posted to /odeme.
PAYMENT_FORM_KINDS = frozenset(
    {
        OperationKind.PREPARE_PAYMENT,
        OperationKind.SAVE_CARD_PAYMENT,
        OperationKind.STORED_CARD_PAYMENT,
        OperationKind.RECURRING_PAYMENT,
        OperationKind.DIRECT_PAYMENT,
    }
)

# Kinds answered with a JSON document.
API_KINDS = frozenset(
    {
        OperationKind.BIN_QUERY,
        OperationKind.REFUND,
        OperationKind.TRANSACTION_LOG,
        OperationKind.LIST_CARDS,
        OperationKind.DELETE_CARD,
        OperationKind.ORDER_STATUS,
        OperationKind.INSTALLMENT_RATES,
    }
)

TOKEN_FIELD = "paytr_token"
PAYMENT_TYPE = "card"

DEFAULT_LANGUAGE = "tr"
DEFAULT_CURRENCY = "TL"
DEFAULT_INSTALLMENT_COUNT = 0
DEFAULT_TIMEOUT_SECONDS = 30

MAX_INSTALLMENT_COUNT = 12
MAX_TRANSACTION_LOG_DAYS = 3

SUPPORTED_CURRENCIES = frozenset({"TL", "USD", "EUR"})
SUPPORTED_LANGUAGES = frozenset({"tr", "en"})
CARD_TYPES = frozenset(
    {"advantage", "axess", "combo", "bonus", "cardfinans", "maximum", "paraf", "world"}
)

FORM_HEADERS: Mapping[str, str] = MappingProxyType(
    {"Content-Type": "application/x-www-form-urlencoded"}
)


def endpoint_for(kind: OperationKind) -> str:
    try:
        return ENDPOINTS[kind]
    except KeyError as exc:
        raise ValueError(f"{kind.value} has no gateway endpoint") from exc
