"""
Reference tables for the error codes the gateway reports.

The gateway sends bare codes in several places: ``failed_reason_code`` on
callbacks and ``err_no`` on refund, order-status and marketplace-transfer
responses. :func:`describe_error` turns those codes into text a human can act
on.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

__all__ = [
    "CALLBACK_ERROR_CODES",
    "ERROR_CATEGORIES",
    "ORDER_STATUS_ERROR_CODES",
    "REFUND_ERROR_CODES",
    "TRANSFER_ERROR_CODES",
    "describe_error",
]

CALLBACK_ERROR_CODES: Mapping[str, str] = MappingProxyType(
    {
        "0": "Variable error, read the accompanying message (e.g. insufficient card limit or balance).",
        "1": "Authentication was not completed. Please retry and finish the process.",
        "2": "Authentication failed. Please retry and enter the password correctly.",
        "3": "Not approved after the security check, or the check could not be performed.",
        "6": "The customer abandoned the payment and left the payment page.",
        "8": "Installments are not available for this card.",
        "9": "This card is not authorised for the transaction.",
        "10": "3-D Secure must be used for this transaction.",
        "11": "Security warning. Check the customer making the transaction.",
        "99": "Transaction failed: technical integration error.",
    }
)

TRANSFER_ERROR_CODES: Mapping[str, str] = MappingProxyType(
    {
        "001": "Invalid request or the store is not active.",
        "002": "Not authorised for this service (not a marketplace).",
        "003": "Invalid trans_id.",
        "004": "paytr_token missing or invalid.",
        "005": "Invalid merchant_oid.",
        "006": "No successful payment found for merchant_oid.",
        "007": "merchant_oid found but the payment has not been notified to the site yet.",
        "008": "Transfers are not possible before the value date.",
        "009": "trans_id must be unique, this trans_id was used before.",
        "010": "Total transfer amount cannot exceed the remaining amount.",
        "012": "Platform commission cannot be less than zero.",
        "091": "transfer_iban failed IBAN validation.",
        "092": "transfer_iban must start with TR, contain no spaces or dashes and be 26 characters.",
        "095": "submerchant_amount cannot be less than zero.",
        "096": "trans_id must be alphanumeric without special characters.",
        "097": "transfer_iban is required.",
        "098": "transfer_name is required.",
        "099": "total_amount must be numeric and greater than zero.",
        "100": "transfer_name must contain a space between first and last name.",
        "101": "First and last name in transfer_name must be at least 2 characters.",
        "201": "paytr_token missing or invalid.",
        "202": "trans_id must be alphanumeric without special characters.",
        "203": "trans_id must be unique, this trans_id was used before.",
        "204": "trans_info is longer than allowed, retry with fewer records.",
        "205": "trans_info must contain between 2 and 2000 transactions.",
        "206": "trans_info is not a valid JSON string.",
        "301": "paytr_token missing or invalid.",
        "302": "trans_id must be alphanumeric without special characters.",
        "303": "trans_id must be unique, this trans_id was used before.",
        "305": "merchant_oids contains too few or too many transactions.",
        "306": "merchant_oids is not a valid JSON string.",
        "BLK": "The transaction is blocked, contact PayTR for details.",
    }
)

REFUND_ERROR_CODES: Mapping[str, str] = MappingProxyType(
    {
        "000": "Refund cannot be processed right now, try again later (service lock).",
        "001": "Invalid request or the store is not active.",
        "002": "Invalid merchant_oid.",
        "003": "Invalid return_amount.",
        "004": "paytr_token missing or invalid.",
        "005": "No successful payment found for merchant_oid.",
        "007": "merchant_oid found but the payment has not been notified to the site yet.",
        "008": "Refunds are not supported for this payment type.",
        "009": "Total refund amount cannot exceed the payment amount.",
        "010": "Insufficient net balance.",
        "011": "Transactions older than one year cannot be refunded.",
    }
)

ORDER_STATUS_ERROR_CODES: Mapping[str, str] = MappingProxyType(
    {
        "001": "Invalid request or the store is not active.",
        "002": "Invalid merchant_oid.",
        "003": "paytr_token missing or invalid.",
        "004": "No transaction found for merchant_oid.",
    }
)

ERROR_CATEGORIES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "callback": CALLBACK_ERROR_CODES,
        "transfer": TRANSFER_ERROR_CODES,
        "refund": REFUND_ERROR_CODES,
        "order_status": ORDER_STATUS_ERROR_CODES,
    }
)


def describe_error(code: object, category: str = "callback") -> str:
    """
    Return the human-readable description of ``code`` within ``category``.

    Unknown codes yield ``"Unknown error code: <code>"``. An unknown category
    is a programming mistake and raises :class:`ValueError`.
    """
    try:
        table = ERROR_CATEGORIES[category]
    except KeyError as exc:
        raise ValueError(
            f"Unknown error category '{category}', expected one of {sorted(ERROR_CATEGORIES)}"
        ) from exc

    key = str(code).strip()
    return table.get(key, f"Unknown error code: {key}")
