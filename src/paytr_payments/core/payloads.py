"""
Helpers for constructing the signed form fields sent to the PayTR gateway.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Dict, Mapping, Optional, Union

from .canonical import (
    BinQueryTokenFields,
    DeleteCardTokenFields,
    InstallmentRatesTokenFields,
    ListCardsTokenFields,
    OrderStatusTokenFields,
    PaymentTokenFields,
    RefundTokenFields,
    TokenFields,
    TransactionLogTokenFields,
    canonicalize,
    encode_bool,
    format_basket,
    format_date,
    generate_request_id,
    to_decimal_string,
    to_minor_units,
)
from .config import GatewayConfig
from .constants import (
    API_KINDS,
    PAYMENT_FORM_KINDS,
    PAYMENT_TYPE,
    TOKEN_FIELD,
    OperationKind,
    endpoint_for,
)
from .models import (
    Amount,
    MerchantCredentials,
    PaymentOptions,
    PreparedPayment,
    RecurringPaymentOptions,
    SaveCardPaymentOptions,
    StoredCardPaymentOptions,
)
from .signing import sign
from .validation import (
    require_text,
    validate_amount,
    validate_bin_number,
    validate_date_range,
    validate_payment_options,
)

__all__ = [
    "SignedFieldSet",
    "build_bin_query_fields",
    "build_delete_card_fields",
    "build_installment_rates_fields",
    "build_list_cards_fields",
    "build_order_status_fields",
    "build_payment_form",
    "build_recurring_form",
    "build_refund_fields",
    "build_save_card_form",
    "build_signed_fields",
    "build_stored_card_form",
    "build_transaction_log_fields",
]

SignedFieldSet = Dict[str, str]


def _token_for(kind: OperationKind, fields: TokenFields, credentials: MerchantCredentials) -> str:
    return sign(credentials.merchant_key, canonicalize(kind, fields, credentials))


def build_signed_fields(
    kind: OperationKind,
    fields: TokenFields,
    credentials: MerchantCredentials,
    extra: Optional[Mapping[str, str]] = None,
) -> SignedFieldSet:
    """
    Build the complete form for one of the JSON API operations.

    The result carries ``merchant_id``, the operation's own fields under their
    protocol names, any ``extra`` unsigned fields and finally ``paytr_token``.
    """
    if kind not in API_KINDS:
        raise ValueError(f"{kind.value} is not a JSON API operation")

    token = _token_for(kind, fields, credentials)
    signed: SignedFieldSet = {"merchant_id": credentials.merchant_id}
    for name, value in dataclasses.asdict(fields).items():
        signed[name] = value
    if extra:
        signed.update(extra)
    signed[TOKEN_FIELD] = token
    return signed


def _payment_form(
    options: PaymentOptions,
    config: GatewayConfig,
    kind: OperationKind,
) -> PreparedPayment:
    if kind not in PAYMENT_FORM_KINDS:
        raise ValueError(f"{kind.value} is not a payment form operation")
    validate_payment_options(options)

    user_ip = options.user_ip or ""
    payment_amount = to_minor_units(options.payment_amount)
    installment_count = str(options.installment_count)
    test_mode = encode_bool(config.test_mode)
    non_3d = encode_bool(options.non_3d)

    token_fields = PaymentTokenFields(
        merchant_oid=options.merchant_oid,
        email=options.email,
        payment_amount=payment_amount,
        currency=options.currency,
        user_ip=user_ip,
        installment_count=options.installment_count,
        test_mode=config.test_mode,
        non_3d=options.non_3d,
    )
    token = _token_for(kind, token_fields, config.credentials)

    form_data: Dict[str, str] = {
        "merchant_id": config.merchant_id,
        "user_ip": user_ip,
        "merchant_oid": options.merchant_oid,
        "email": options.email,
        "payment_type": PAYMENT_TYPE,
        "payment_amount": payment_amount,
        "currency": options.currency,
        "test_mode": test_mode,
        "non_3d": non_3d,
        "merchant_ok_url": options.merchant_ok_url,
        "merchant_fail_url": options.merchant_fail_url,
        "user_name": options.user.name,
        "user_address": options.user.address,
        "user_phone": options.user.phone,
        "user_basket": format_basket(options.basket_items),
        "debug_on": encode_bool(config.debug_mode),
        "client_lang": config.language,
        TOKEN_FIELD: token,
        "installment_count": installment_count,
        "card_type": options.card_type or "",
        "non3d_test_failed": encode_bool(options.non3d_test_failed),
    }

    card = options.card_info
    if card is not None:
        form_data["cc_owner"] = card.cc_owner
        form_data["card_number"] = card.card_number
        form_data["expiry_month"] = card.expiry_month
        form_data["expiry_year"] = card.expiry_year
        form_data["cvv"] = card.cvv

    # JSON answer instead of a redirect; needs Non-3D permission on the store.
    if options.sync_mode:
        form_data["sync_mode"] = "1"

    return PreparedPayment(form_action=endpoint_for(kind), form_data=form_data, token=token)


def build_payment_form(
    options: PaymentOptions,
    config: GatewayConfig,
    *,
    kind: OperationKind = OperationKind.PREPARE_PAYMENT,
) -> PreparedPayment:
    """Sign a payment form for the hosted page or, with ``card_info``, the Direct API."""
    return _payment_form(options, config, kind)


def _extend(base: PreparedPayment, additions: Mapping[str, str]) -> PreparedPayment:
    form_data = dict(base.form_data)
    form_data.update(additions)
    return PreparedPayment(form_action=base.form_action, form_data=form_data, token=base.token)


def build_save_card_form(options: SaveCardPaymentOptions, config: GatewayConfig) -> PreparedPayment:
    base = _payment_form(options.payment, config, OperationKind.SAVE_CARD_PAYMENT)
    additions = {"store_card": "1"}
    if options.utoken:
        additions["utoken"] = options.utoken
    return _extend(base, additions)


def build_stored_card_form(
    options: StoredCardPaymentOptions,
    config: GatewayConfig,
) -> PreparedPayment:
    require_text(options.utoken, "utoken")
    require_text(options.ctoken, "ctoken")

    # A stored card already fixes the brand, so card_type is always sent blank.
    payment = dataclasses.replace(options.payment, card_type=None)
    base = _payment_form(payment, config, OperationKind.STORED_CARD_PAYMENT)
    additions = {"utoken": options.utoken, "ctoken": options.ctoken}
    if options.require_cvv is not None:
        additions["require_cvv"] = encode_bool(options.require_cvv)
    return _extend(base, additions)


def build_recurring_form(
    options: RecurringPaymentOptions,
    config: GatewayConfig,
) -> PreparedPayment:
    require_text(options.utoken, "utoken")
    require_text(options.ctoken, "ctoken")

    base = _payment_form(options.payment, config, OperationKind.RECURRING_PAYMENT)
    return _extend(
        base,
        {"recurring_payment": "1", "utoken": options.utoken, "ctoken": options.ctoken},
    )


def build_bin_query_fields(bin_number: str, credentials: MerchantCredentials) -> SignedFieldSet:
    validate_bin_number(bin_number)
    return build_signed_fields(
        OperationKind.BIN_QUERY, BinQueryTokenFields(bin_number=bin_number), credentials
    )


def build_refund_fields(
    merchant_oid: str,
    return_amount: Amount,
    credentials: MerchantCredentials,
    *,
    reference_no: Optional[str] = None,
) -> SignedFieldSet:
    require_text(merchant_oid, "merchant_oid")
    validate_amount(return_amount, "return_amount")
    extra = {"reference_no": reference_no} if reference_no else None
    return build_signed_fields(
        OperationKind.REFUND,
        RefundTokenFields(
            merchant_oid=merchant_oid,
            return_amount=to_decimal_string(return_amount),
        ),
        credentials,
        extra,
    )


def build_transaction_log_fields(
    start_date: Union[datetime, date],
    end_date: Union[datetime, date],
    credentials: MerchantCredentials,
) -> SignedFieldSet:
    start_dt, end_dt = validate_date_range(start_date, end_date)
    return build_signed_fields(
        OperationKind.TRANSACTION_LOG,
        TransactionLogTokenFields(start_date=format_date(start_dt), end_date=format_date(end_dt)),
        credentials,
    )


def build_list_cards_fields(utoken: str, credentials: MerchantCredentials) -> SignedFieldSet:
    require_text(utoken, "utoken")
    return build_signed_fields(
        OperationKind.LIST_CARDS, ListCardsTokenFields(utoken=utoken), credentials
    )


def build_delete_card_fields(
    utoken: str,
    ctoken: str,
    credentials: MerchantCredentials,
) -> SignedFieldSet:
    require_text(utoken, "utoken")
    require_text(ctoken, "ctoken")
    return build_signed_fields(
        OperationKind.DELETE_CARD,
        DeleteCardTokenFields(ctoken=ctoken, utoken=utoken),
        credentials,
    )


def build_order_status_fields(merchant_oid: str, credentials: MerchantCredentials) -> SignedFieldSet:
    require_text(merchant_oid, "merchant_oid")
    return build_signed_fields(
        OperationKind.ORDER_STATUS,
        OrderStatusTokenFields(merchant_oid=merchant_oid),
        credentials,
    )


def build_installment_rates_fields(
    credentials: MerchantCredentials,
    *,
    request_id: Optional[str] = None,
) -> SignedFieldSet:
    """``request_id`` defaults to a fresh timestamp-based identifier."""
    request_id = generate_request_id() if request_id is None else request_id
    require_text(request_id, "request_id")
    return build_signed_fields(
        OperationKind.INSTALLMENT_RATES,
        InstallmentRatesTokenFields(request_id=request_id),
        credentials,
    )
