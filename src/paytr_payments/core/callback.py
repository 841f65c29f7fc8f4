"""
Verification of the asynchronous payment notifications posted by PayTR.

The gateway keeps re-sending a notification until the merchant endpoint
answers with the literal body ``OK``. Anything else, conventionally
``INVALID_HASH`` for a bad signature, counts as a rejection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from .canonical import CallbackTokenFields, canonicalize
from .constants import OperationKind
from .error_codes import describe_error
from .models import MerchantCredentials
from .signing import sign, tokens_match

__all__ = [
    "CALLBACK_INVALID_HASH",
    "CALLBACK_OK",
    "CallbackPayload",
    "callback_reply",
    "compute_callback_hash",
    "verify_callback",
]

CALLBACK_OK = "OK"
CALLBACK_INVALID_HASH = "INVALID_HASH"

_REQUIRED_FIELDS = ("merchant_oid", "status", "total_amount", "hash")


def _optional_text(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class CallbackPayload:
    """
    Fields of an inbound notification.

    Built with :meth:`from_mapping`, which never raises; missing required
    fields are left as ``None`` and make verification fail.
    """

    merchant_oid: Optional[str]
    status: Optional[str]
    total_amount: Optional[str]
    hash: Optional[str]
    failed_reason_code: Optional[str] = None
    failed_reason_msg: Optional[str] = None
    test_mode: Optional[str] = None
    payment_type: Optional[str] = None
    currency: Optional[str] = None
    payment_amount: Optional[str] = None
    utoken: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CallbackPayload":
        required = {}
        for key in _REQUIRED_FIELDS:
            value = data.get(key)
            required[key] = value if isinstance(value, str) else None
        return cls(
            merchant_oid=required["merchant_oid"],
            status=required["status"],
            total_amount=required["total_amount"],
            hash=required["hash"],
            failed_reason_code=_optional_text(data, "failed_reason_code"),
            failed_reason_msg=_optional_text(data, "failed_reason_msg"),
            test_mode=_optional_text(data, "test_mode"),
            payment_type=_optional_text(data, "payment_type"),
            currency=_optional_text(data, "currency"),
            payment_amount=_optional_text(data, "payment_amount"),
            utoken=_optional_text(data, "utoken"),
        )

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    @property
    def is_test(self) -> bool:
        return self.test_mode == "1"

    @property
    def total_amount_decimal(self) -> Optional[Decimal]:
        """``total_amount`` converted from minor units back to major units."""
        if self.total_amount is None:
            return None
        try:
            return Decimal(self.total_amount) / 100
        except InvalidOperation:
            return None

    @property
    def failure_description(self) -> Optional[str]:
        """Gateway message for a failed payment, falling back to the code table."""
        if self.succeeded:
            return None
        if self.failed_reason_msg:
            return self.failed_reason_msg
        return describe_error(self.failed_reason_code or "0", "callback")


def compute_callback_hash(
    merchant_oid: str,
    status: str,
    total_amount: str,
    credentials: MerchantCredentials,
) -> str:
    """Hash the gateway is expected to send for the given notification fields."""
    canonical = canonicalize(
        OperationKind.VERIFY_CALLBACK,
        CallbackTokenFields(
            merchant_oid=merchant_oid,
            status=status,
            total_amount=total_amount,
        ),
        credentials,
    )
    return sign(credentials.merchant_key, canonical)


def verify_callback(
    payload: Union[CallbackPayload, Mapping[str, Any]],
    credentials: MerchantCredentials,
) -> bool:
    """
    Return ``True`` when the notification carries a valid hash.

    Malformed input (missing fields, non-string values) is reported as
    ``False``; this function does not raise for anything a caller can send.
    """
    if not isinstance(payload, CallbackPayload):
        if not isinstance(payload, Mapping):
            logging.warning("Rejected PayTR callback: payload is not a mapping")
            return False
        payload = CallbackPayload.from_mapping(payload)

    required = (payload.merchant_oid, payload.status, payload.total_amount, payload.hash)
    if not all(isinstance(value, str) for value in required):
        logging.warning("Rejected PayTR callback: required fields missing or not text")
        return False

    try:
        expected = compute_callback_hash(
            payload.merchant_oid,
            payload.status,
            payload.total_amount,
            credentials,
        )
    except UnicodeEncodeError:
        logging.warning("Rejected PayTR callback: fields are not valid UTF-8 text")
        return False
    if not tokens_match(expected, payload.hash):
        logging.warning("Rejected PayTR callback for order %s: hash mismatch", payload.merchant_oid)
        return False
    return True


def callback_reply(is_valid: bool) -> str:
    """Body to send back to the gateway after handling a notification."""
    return CALLBACK_OK if is_valid else CALLBACK_INVALID_HASH
