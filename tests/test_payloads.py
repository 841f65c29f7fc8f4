"""
Tests for the signed form builders.
"""
import dataclasses
from datetime import date, datetime
from decimal import Decimal

import pytest

from paytr_payments import (
    CardInfo,
    GatewayConfig,
    OperationKind,
    RecurringPaymentOptions,
    SaveCardPaymentOptions,
    StoredCardPaymentOptions,
    ValidationError,
)
from paytr_payments.core.payloads import (
    build_bin_query_fields,
    build_delete_card_fields,
    build_installment_rates_fields,
    build_list_cards_fields,
    build_order_status_fields,
    build_payment_form,
    build_recurring_form,
    build_refund_fields,
    build_save_card_form,
    build_signed_fields,
    build_stored_card_form,
    build_transaction_log_fields,
)
from paytr_payments.core.canonical import BinQueryTokenFields

PAYMENT_TOKEN = "DkOvWMfC+gTmx5NuhMR11qg1byi3wb4fw6tpFjgc2hY="


# ============== Payment forms ==============

class TestPaymentForm:

    def test_form_fields(self, payment_options, config):
        prepared = build_payment_form(payment_options, config)

        assert prepared.form_action == "https://www.paytr.com/odeme"
        assert prepared.token == PAYMENT_TOKEN
        data = prepared.form_data
        assert data["merchant_id"] == "123456"
        assert data["user_ip"] == "127.0.0.1"
        assert data["merchant_oid"] == "ORDER-1"
        assert data["payment_type"] == "card"
        assert data["payment_amount"] == "10099"
        assert data["currency"] == "TL"
        assert data["test_mode"] == "1"
        assert data["non_3d"] == "0"
        assert data["installment_count"] == "0"
        assert data["user_basket"] == '[["Item","100.99",1]]'
        assert data["debug_on"] == "0"
        assert data["client_lang"] == "tr"
        assert data["card_type"] == ""
        assert data["non3d_test_failed"] == "0"
        assert data["paytr_token"] == PAYMENT_TOKEN
        assert "sync_mode" not in data
        assert "card_number" not in data

    def test_all_values_are_strings(self, payment_options, config):
        prepared = build_payment_form(payment_options, config)
        assert all(isinstance(value, str) for value in prepared.form_data.values())

    def test_non_3d_changes_token(self, payment_options, config):
        options = dataclasses.replace(payment_options, non_3d=True)
        prepared = build_payment_form(options, config)
        assert prepared.form_data["non_3d"] == "1"
        assert prepared.form_data["paytr_token"] != PAYMENT_TOKEN

    def test_missing_ip_is_signed_as_empty(self, payment_options, credentials):
        options = dataclasses.replace(payment_options, user_ip=None)
        prepared = build_payment_form(options, GatewayConfig(credentials=credentials))
        assert prepared.form_data["user_ip"] == ""
        assert prepared.token == "9GH59zvOzm+VeLitVhMZYA3RqsKLoJF7MUH700AZtc4="

    def test_card_fields_and_sync_mode(self, payment_options, config):
        card = CardInfo(
            cc_owner="Ayse Yilmaz",
            card_number="4355084355084358",
            expiry_month="12",
            expiry_year="30",
            cvv="000",
        )
        options = dataclasses.replace(payment_options, card_info=card, sync_mode=True)
        prepared = build_payment_form(options, config, kind=OperationKind.DIRECT_PAYMENT)

        data = prepared.form_data
        assert data["card_number"] == "4355084355084358"
        assert data["cc_owner"] == "Ayse Yilmaz"
        assert data["expiry_month"] == "12"
        assert data["expiry_year"] == "30"
        assert data["cvv"] == "000"
        assert data["sync_mode"] == "1"
        assert prepared.token == PAYMENT_TOKEN

    def test_invalid_options_raise_before_signing(self, payment_options, config):
        options = dataclasses.replace(payment_options, email="not-an-email")
        with pytest.raises(ValidationError) as exc_info:
            build_payment_form(options, config)
        assert exc_info.value.field_name == "email"

    def test_api_kind_is_rejected(self, payment_options, config):
        with pytest.raises(ValueError):
            build_payment_form(payment_options, config, kind=OperationKind.REFUND)


class TestComposedForms:

    def test_save_card_keeps_base_token(self, payment_options, config):
        prepared = build_save_card_form(
            SaveCardPaymentOptions(payment=payment_options, utoken="UTOKEN-1"), config
        )
        assert prepared.form_data["store_card"] == "1"
        assert prepared.form_data["utoken"] == "UTOKEN-1"
        assert prepared.form_data["paytr_token"] == PAYMENT_TOKEN

    def test_save_card_without_utoken(self, payment_options, config):
        prepared = build_save_card_form(SaveCardPaymentOptions(payment=payment_options), config)
        assert "utoken" not in prepared.form_data

    def test_stored_card_blanks_card_type(self, payment_options, config):
        options = dataclasses.replace(payment_options, card_type="bonus")
        prepared = build_stored_card_form(
            StoredCardPaymentOptions(
                payment=options, utoken="UTOKEN-1", ctoken="CTOKEN-1", require_cvv=True
            ),
            config,
        )
        data = prepared.form_data
        assert data["card_type"] == ""
        assert data["utoken"] == "UTOKEN-1"
        assert data["ctoken"] == "CTOKEN-1"
        assert data["require_cvv"] == "1"
        assert data["paytr_token"] == PAYMENT_TOKEN

    def test_stored_card_requires_tokens(self, payment_options, config):
        with pytest.raises(ValidationError):
            build_stored_card_form(
                StoredCardPaymentOptions(payment=payment_options, utoken="", ctoken="CTOKEN-1"),
                config,
            )

    def test_recurring(self, payment_options, config):
        prepared = build_recurring_form(
            RecurringPaymentOptions(payment=payment_options, utoken="UTOKEN-1", ctoken="CTOKEN-1"),
            config,
        )
        data = prepared.form_data
        assert data["recurring_payment"] == "1"
        assert data["utoken"] == "UTOKEN-1"
        assert data["ctoken"] == "CTOKEN-1"
        assert data["paytr_token"] == PAYMENT_TOKEN


# ============== JSON API forms ==============

class TestSignedFields:

    def test_bin_query(self, credentials):
        fields = build_bin_query_fields("979203", credentials)
        assert list(fields) == ["merchant_id", "bin_number", "paytr_token"]
        assert fields["paytr_token"] == "bfVsAQ4cDKaiXPZV7vT2DE7U5vEQle2HmkAlrxc8KCk="

    def test_bin_query_validation(self, credentials):
        with pytest.raises(ValidationError):
            build_bin_query_fields("97920", credentials)

    def test_refund(self, credentials):
        fields = build_refund_fields("ORDER-1", 50, credentials)
        assert fields["merchant_oid"] == "ORDER-1"
        assert fields["return_amount"] == "50.00"
        assert fields["paytr_token"] == "LHZGc6s4Nz++LgFiXh+mcjAIon0vgU7Fo1s1/i1pnBk="
        assert "reference_no" not in fields

    def test_refund_reference_is_unsigned(self, credentials):
        fields = build_refund_fields("ORDER-1", "50", credentials, reference_no="REF-9")
        assert fields["reference_no"] == "REF-9"
        assert fields["paytr_token"] == "LHZGc6s4Nz++LgFiXh+mcjAIon0vgU7Fo1s1/i1pnBk="

    @pytest.mark.parametrize("amount", [0, -5, "0.001"])
    def test_refund_rejects_non_positive(self, credentials, amount):
        with pytest.raises(ValidationError):
            build_refund_fields("ORDER-1", amount, credentials)

    def test_transaction_log(self, credentials):
        fields = build_transaction_log_fields(
            date(2024, 1, 1), datetime(2024, 1, 3, 23, 59, 59), credentials
        )
        assert fields["start_date"] == "2024-01-01 00:00:00"
        assert fields["end_date"] == "2024-01-03 23:59:59"
        assert fields["paytr_token"] == "6YQOCjpzMFJQ7gAJPzgoN8UMcXoHN1mwMhY1NdjqpIE="

    def test_transaction_log_range_limit(self, credentials):
        with pytest.raises(ValidationError):
            build_transaction_log_fields(date(2024, 1, 1), date(2024, 1, 10), credentials)

    def test_list_cards(self, credentials):
        fields = build_list_cards_fields("UTOKEN-1", credentials)
        assert fields["utoken"] == "UTOKEN-1"
        assert fields["paytr_token"] == "nfAs4H9HcGg50qHflDtkTcNYA7YJpp7bhMJen2kQIhc="

    def test_delete_card(self, credentials):
        fields = build_delete_card_fields("UTOKEN-1", "CTOKEN-1", credentials)
        assert list(fields) == ["merchant_id", "ctoken", "utoken", "paytr_token"]
        assert fields["paytr_token"] == "AeXTYMDMwTY+aud/MeHuD/QgGrOI4qKaW8reNo9cRks="

    def test_order_status(self, credentials):
        fields = build_order_status_fields("ORDER-1", credentials)
        assert fields["paytr_token"] == "eTKEc2e6sclpZhiWObkK6V+1iSaSf23HDWHxmOJazac="

    def test_installment_rates(self, credentials):
        fields = build_installment_rates_fields(credentials, request_id="1700000000000abc1234")
        assert fields["request_id"] == "1700000000000abc1234"
        assert fields["paytr_token"] == "SpIPobPJ5M1VRNRc4MU/4jcxbpa2Ih3ZxEuhuZFOZfs="

    def test_installment_rates_generates_request_id(self, credentials):
        fields = build_installment_rates_fields(credentials)
        assert len(fields["request_id"]) == 20

    def test_payment_kind_is_rejected(self, credentials):
        with pytest.raises(ValueError):
            build_signed_fields(
                OperationKind.PREPARE_PAYMENT, BinQueryTokenFields("979203"), credentials
            )

    def test_amount_decimal_input(self, credentials):
        fields = build_refund_fields("ORDER-1", Decimal("50.0"), credentials)
        assert fields["return_amount"] == "50.00"

    def test_refund_amount_beyond_precision(self, credentials):
        with pytest.raises(ValidationError):
            build_refund_fields("ORDER-1", Decimal("1e30"), credentials)
