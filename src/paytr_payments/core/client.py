"""
HTTP client helpers for the PayTR gateway.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol, Union

import requests

from .callback import CallbackPayload, verify_callback
from .config import GatewayConfig
from .constants import FORM_HEADERS, OperationKind, endpoint_for
from .errors import TransportError, ValidationError
from .models import (
    Amount,
    PaymentOptions,
    PreparedPayment,
    RecurringPaymentOptions,
    SaveCardPaymentOptions,
    StoredCardPaymentOptions,
)
from .payloads import (
    SignedFieldSet,
    build_bin_query_fields,
    build_delete_card_fields,
    build_installment_rates_fields,
    build_list_cards_fields,
    build_order_status_fields,
    build_payment_form,
    build_recurring_form,
    build_refund_fields,
    build_save_card_form,
    build_stored_card_form,
    build_transaction_log_fields,
)
from .responses import (
    BinQueryResult,
    CardListResult,
    DeleteCardResult,
    DirectPaymentResult,
    InstallmentRatesResult,
    OperationResult,
    OrderStatusResult,
    RefundResult,
    ResultStatus,
    TransactionLogResult,
    classify,
)

__all__ = [
    "PayTRClient",
    "RequestsTransport",
    "Transport",
]


class Transport(Protocol):
    def send(self, url: str, fields: Mapping[str, str]) -> str:
        ...


class RequestsTransport:
    """
    Posts URL-encoded forms with :mod:`requests`.

    Non-2xx answers and network failures raise :class:`TransportError`; no
    retries are attempted.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout_seconds: float = 30,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds

    def send(self, url: str, fields: Mapping[str, str]) -> str:
        try:
            response = self.session.post(
                url,
                data=dict(fields),
                headers=dict(FORM_HEADERS),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"PayTR responded with {response.status_code}: {response.reason}",
                url=url,
                status_code=response.status_code,
                body=response.text,
            )
        return response.text


class PayTRClient:
    """
    One method per gateway operation, bound to a single merchant configuration.

    Form preparation methods are pure. The remaining methods make exactly one
    POST through ``transport`` and return a typed
    :class:`~paytr_payments.core.responses.OperationResult`.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        transport: Optional[Transport] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if transport is not None and session is not None:
            raise ValueError("Provide either a transport or a requests session, not both.")
        self.config = config
        self.transport: Transport = transport or RequestsTransport(
            session, timeout_seconds=config.timeout_seconds
        )

    def _call(
        self,
        kind: OperationKind,
        fields: SignedFieldSet,
        *,
        reference: Optional[str] = None,
    ) -> OperationResult:
        url = endpoint_for(kind)
        if reference:
            logging.info("Sending PayTR %s request to %s for %s", kind.value, url, reference)
        else:
            logging.info("Sending PayTR %s request to %s", kind.value, url)
        raw_body = self.transport.send(url, fields)
        return classify(raw_body, kind)

    # Payment forms

    def prepare_payment(self, options: PaymentOptions) -> PreparedPayment:
        return build_payment_form(options, self.config)

    def prepare_save_card_payment(self, options: SaveCardPaymentOptions) -> PreparedPayment:
        return build_save_card_form(options, self.config)

    def prepare_stored_card_payment(self, options: StoredCardPaymentOptions) -> PreparedPayment:
        return build_stored_card_form(options, self.config)

    def prepare_recurring_payment(self, options: RecurringPaymentOptions) -> PreparedPayment:
        return build_recurring_form(options, self.config)

    def process_direct_payment(self, options: PaymentOptions) -> DirectPaymentResult:
        """
        Post card data to the gateway from the server (Direct API).

        The result is ``redirect`` when the payer must complete 3-D Secure
        (``redirect_html`` holds the page), ``success`` or ``wait_callback``
        in sync mode, and ``error`` when the gateway declines or cannot be
        reached. Unlike the JSON API methods this never raises
        :class:`TransportError`.
        """
        if options.card_info is None:
            raise ValidationError("card_info", "is required for direct payments")
        payment = build_payment_form(options, self.config, kind=OperationKind.DIRECT_PAYMENT)
        try:
            return self._call(
                OperationKind.DIRECT_PAYMENT,
                payment.form_data,
                reference=f"{options.merchant_oid} (card ending {options.card_info.last_four})",
            )
        except TransportError as exc:
            logging.error("PayTR direct payment for %s failed: %s", options.merchant_oid, exc)
            # Non-2xx bodies are classified like any other answer.
            if exc.body:
                return classify(exc.body, OperationKind.DIRECT_PAYMENT)
            return DirectPaymentResult(
                kind=OperationKind.DIRECT_PAYMENT,
                status=ResultStatus.ERROR,
                message=str(exc),
            )

    # Callbacks

    def verify_callback(self, payload: Union[CallbackPayload, Mapping[str, Any]]) -> bool:
        return verify_callback(payload, self.config.credentials)

    # JSON API operations

    def query_bin(self, bin_number: str) -> BinQueryResult:
        fields = build_bin_query_fields(bin_number, self.config.credentials)
        return self._call(OperationKind.BIN_QUERY, fields)

    def refund(
        self,
        merchant_oid: str,
        return_amount: Amount,
        reference_no: Optional[str] = None,
    ) -> RefundResult:
        fields = build_refund_fields(
            merchant_oid, return_amount, self.config.credentials, reference_no=reference_no
        )
        return self._call(OperationKind.REFUND, fields, reference=merchant_oid)

    def get_transactions(
        self,
        start_date: Union[datetime, date],
        end_date: Union[datetime, date],
    ) -> TransactionLogResult:
        """List transactions between two moments; the range may span at most 3 days."""
        fields = build_transaction_log_fields(start_date, end_date, self.config.credentials)
        return self._call(OperationKind.TRANSACTION_LOG, fields)

    def list_cards(self, utoken: str) -> CardListResult:
        fields = build_list_cards_fields(utoken, self.config.credentials)
        return self._call(OperationKind.LIST_CARDS, fields)

    def delete_card(self, utoken: str, ctoken: str) -> DeleteCardResult:
        fields = build_delete_card_fields(utoken, ctoken, self.config.credentials)
        return self._call(OperationKind.DELETE_CARD, fields)

    def get_order_status(self, merchant_oid: str) -> OrderStatusResult:
        fields = build_order_status_fields(merchant_oid, self.config.credentials)
        return self._call(OperationKind.ORDER_STATUS, fields, reference=merchant_oid)

    def get_installment_rates(self, *, request_id: Optional[str] = None) -> InstallmentRatesResult:
        fields = build_installment_rates_fields(self.config.credentials, request_id=request_id)
        return self._call(OperationKind.INSTALLMENT_RATES, fields)
