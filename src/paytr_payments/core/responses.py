"""
Classification of raw gateway responses into typed results.

The payment form endpoint answers with HTML (a 3-D Secure interstitial) or,
in sync mode, with JSON. Nothing in the response says which one it is, so the
body is sniffed: HTML markers first, then a JSON parse, then the ``status``
field. The other endpoints always answer with JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from .constants import API_KINDS, PAYMENT_FORM_KINDS, OperationKind
from .error_codes import describe_error
from .errors import ResponseParseError

__all__ = [
    "BinQueryResult",
    "CardListResult",
    "DeleteCardResult",
    "DirectPaymentResult",
    "InstallmentRatesResult",
    "OperationResult",
    "OrderStatusResult",
    "RefundResult",
    "ResultStatus",
    "StoredCard",
    "Transaction",
    "TransactionLogResult",
    "classify",
]

_HTML_MARKERS = ("<html", "<form")

_ERROR_CATEGORY: Dict[OperationKind, str] = {
    OperationKind.REFUND: "refund",
    OperationKind.ORDER_STATUS: "order_status",
    OperationKind.DIRECT_PAYMENT: "callback",
}


class ResultStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    REDIRECT = "redirect"
    WAIT_CALLBACK = "wait_callback"


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return str(value).strip().lower() in ("1", "true")


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of one gateway call.

    ``status`` is the discriminant. On ``error`` the gateway's ``err_msg`` and
    ``err_no`` are kept verbatim in ``message`` and ``code``; ``description``
    is looked up from the error-code tables when the operation has one.
    """

    kind: OperationKind
    status: ResultStatus
    message: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict)
    raw_body: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {}

    @classmethod
    def success(
        cls,
        kind: OperationKind,
        payload: Mapping[str, Any],
        raw_body: Optional[str] = None,
    ) -> "OperationResult":
        return cls(
            kind=kind,
            status=ResultStatus.SUCCESS,
            raw=payload,
            raw_body=raw_body,
            **cls._success_fields(payload),
        )

    @classmethod
    def error(
        cls,
        kind: OperationKind,
        payload: Mapping[str, Any],
        raw_body: Optional[str] = None,
        *,
        default_message: str = "Unknown error",
    ) -> "OperationResult":
        message = payload.get("err_msg") or payload.get("reason")
        code = _text(payload.get("err_no"))
        category = _ERROR_CATEGORY.get(kind)
        description = describe_error(code, category) if code and category else None
        return cls(
            kind=kind,
            status=ResultStatus.ERROR,
            message=str(message) if message else (description or default_message),
            code=code,
            description=description,
            raw=payload,
            raw_body=raw_body,
        )


@dataclass(frozen=True)
class BinQueryResult(OperationResult):
    issuer_name: Optional[str] = None
    card_type: Optional[str] = None
    card_family: Optional[str] = None
    bin: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "issuer_name": _text(payload.get("issuer_name")),
            "card_type": _text(payload.get("card_type")),
            "card_family": _text(payload.get("card_family")),
            "bin": _text(payload.get("bin")),
            "country": _text(payload.get("country")),
        }


@dataclass(frozen=True)
class RefundResult(OperationResult):
    merchant_oid: Optional[str] = None
    return_amount: Optional[str] = None
    is_test: Optional[bool] = None

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "merchant_oid": _text(payload.get("merchant_oid")),
            "return_amount": _text(payload.get("return_amount")),
            "is_test": _flag(payload.get("is_test")),
        }


@dataclass(frozen=True)
class Transaction:
    merchant_oid: Optional[str]
    status: Optional[str]
    amount: Optional[str]
    currency: Optional[str]
    date: Optional[str]
    type: Optional[str]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Transaction":
        return cls(
            merchant_oid=_text(data.get("merchant_oid")),
            status=_text(data.get("status")),
            amount=_text(data.get("amount")),
            currency=_text(data.get("currency")),
            date=_text(data.get("date")),
            type=_text(data.get("type")),
        )


@dataclass(frozen=True)
class TransactionLogResult(OperationResult):
    transactions: Tuple[Transaction, ...] = ()

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        rows = payload.get("transactions") or ()
        return {
            "transactions": tuple(
                Transaction.from_mapping(row) for row in rows if isinstance(row, Mapping)
            )
        }


@dataclass(frozen=True)
class StoredCard:
    ctoken: Optional[str]
    last_four: Optional[str]
    first_six: Optional[str]
    card_family: Optional[str]
    bank_name: Optional[str]
    require_cvv: bool

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StoredCard":
        return cls(
            ctoken=_text(data.get("ctoken")),
            last_four=_text(data.get("c_last_four")),
            first_six=_text(data.get("c_first_six")),
            card_family=_text(data.get("card_family")),
            bank_name=_text(data.get("bank_name")),
            require_cvv=bool(_flag(data.get("require_cvv"))),
        )


@dataclass(frozen=True)
class CardListResult(OperationResult):
    cards: Tuple[StoredCard, ...] = ()

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        rows = payload.get("cards") or ()
        return {
            "cards": tuple(StoredCard.from_mapping(row) for row in rows if isinstance(row, Mapping))
        }


@dataclass(frozen=True)
class DeleteCardResult(OperationResult):
    pass


@dataclass(frozen=True)
class OrderStatusResult(OperationResult):
    merchant_oid: Optional[str] = None
    payment_status: Optional[str] = None
    payment_amount: Optional[str] = None
    currency: Optional[str] = None
    payment_type: Optional[str] = None
    test_mode: Optional[bool] = None

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "merchant_oid": _text(payload.get("merchant_oid")),
            "payment_status": _text(payload.get("payment_status")),
            "payment_amount": _text(payload.get("payment_amount")),
            "currency": _text(payload.get("currency")),
            "payment_type": _text(payload.get("payment_type")),
            "test_mode": _flag(payload.get("test_mode")),
        }


@dataclass(frozen=True)
class InstallmentRatesResult(OperationResult):
    rates: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {"rates": {key: value for key, value in payload.items() if key != "status"}}


@dataclass(frozen=True)
class DirectPaymentResult(OperationResult):
    redirect_html: Optional[str] = None
    payment_completed: bool = False

    @classmethod
    def _success_fields(cls, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return {"payment_completed": True}


_RESULT_TYPES: Dict[OperationKind, Type[OperationResult]] = {
    OperationKind.BIN_QUERY: BinQueryResult,
    OperationKind.REFUND: RefundResult,
    OperationKind.TRANSACTION_LOG: TransactionLogResult,
    OperationKind.LIST_CARDS: CardListResult,
    OperationKind.DELETE_CARD: DeleteCardResult,
    OperationKind.ORDER_STATUS: OrderStatusResult,
    OperationKind.INSTALLMENT_RATES: InstallmentRatesResult,
}


def _classify_payment_form(raw_body: str, kind: OperationKind) -> DirectPaymentResult:
    lowered = raw_body.lower()
    if any(marker in lowered for marker in _HTML_MARKERS):
        return DirectPaymentResult(
            kind=kind,
            status=ResultStatus.REDIRECT,
            redirect_html=raw_body,
            raw_body=raw_body,
        )

    try:
        payload = json.loads(raw_body)
    except ValueError:
        # HTML without the usual markers still needs to be shown to the payer.
        return DirectPaymentResult(
            kind=kind,
            status=ResultStatus.REDIRECT,
            redirect_html=raw_body,
            raw_body=raw_body,
        )

    if not isinstance(payload, dict):
        return DirectPaymentResult.error(kind, {}, raw_body, default_message="Payment failed")

    status = payload.get("status")
    if status == ResultStatus.SUCCESS.value:
        return DirectPaymentResult.success(kind, payload, raw_body)
    if status == ResultStatus.WAIT_CALLBACK.value:
        return DirectPaymentResult(
            kind=kind,
            status=ResultStatus.WAIT_CALLBACK,
            raw=payload,
            raw_body=raw_body,
        )
    return DirectPaymentResult.error(kind, payload, raw_body, default_message="Payment failed")


def _classify_api(raw_body: str, kind: OperationKind) -> OperationResult:
    try:
        payload = json.loads(raw_body)
    except ValueError as exc:
        raise ResponseParseError(
            f"Invalid JSON response from PayTR for {kind.value}", raw_body=raw_body
        ) from exc
    if not isinstance(payload, dict):
        raise ResponseParseError(
            f"Expected a JSON object from PayTR for {kind.value}", raw_body=raw_body
        )

    result_type = _RESULT_TYPES[kind]
    if payload.get("status") == ResultStatus.SUCCESS.value:
        return result_type.success(kind, payload, raw_body)
    return result_type.error(kind, payload, raw_body)


def classify(
    raw_body: str,
    kind: OperationKind = OperationKind.DIRECT_PAYMENT,
) -> OperationResult:
    """
    Map a raw response body to the typed result for ``kind``.

    Payment-form responses never raise: unparseable bodies are treated as
    redirect HTML. JSON API responses must parse, otherwise
    :class:`ResponseParseError` is raised with the body attached.
    """
    if kind in PAYMENT_FORM_KINDS:
        result: OperationResult = _classify_payment_form(raw_body, kind)
    elif kind in API_KINDS:
        result = _classify_api(raw_body, kind)
    else:
        raise ValueError(f"{kind.value} has no gateway response to classify")

    logging.debug("Classified %s response as %s", kind.value, result.status.value)
    return result
