"""
Tests for response classification.
"""
import json

import pytest

from paytr_payments import OperationKind, ResponseParseError, ResultStatus
from paytr_payments.core.responses import (
    BinQueryResult,
    CardListResult,
    DirectPaymentResult,
    InstallmentRatesResult,
    OrderStatusResult,
    RefundResult,
    TransactionLogResult,
    classify,
)


# ============== Payment form responses ==============

class TestPaymentFormClassification:

    def test_success(self):
        result = classify('{"status":"success", "merchant_oid":"X"}')
        assert isinstance(result, DirectPaymentResult)
        assert result.status is ResultStatus.SUCCESS
        assert result.ok is True
        assert result.payment_completed is True
        assert result.raw["merchant_oid"] == "X"

    def test_html_is_redirect(self):
        body = "<html><form action='https://bank.example/3ds'></form></html>"
        result = classify(body)
        assert result.status is ResultStatus.REDIRECT
        assert result.redirect_html == body
        assert result.ok is False

    def test_uppercase_form_marker_is_redirect(self):
        result = classify("<FORM method='post'></FORM>")
        assert result.status is ResultStatus.REDIRECT

    def test_unparseable_body_is_redirect(self):
        body = "<div>Continue to your bank</div>"
        result = classify(body)
        assert result.status is ResultStatus.REDIRECT
        assert result.redirect_html == body

    def test_wait_callback(self):
        result = classify('{"status":"wait_callback"}')
        assert result.status is ResultStatus.WAIT_CALLBACK
        assert result.ok is False

    def test_error_message_is_verbatim(self):
        result = classify('{"status":"failed","err_msg":"no funds"}')
        assert result.status is ResultStatus.ERROR
        assert result.message == "no funds"

    def test_reason_is_used_without_err_msg(self):
        result = classify('{"status":"failed","reason":"Card declined"}')
        assert result.message == "Card declined"

    def test_default_message(self):
        result = classify('{"status":"failed"}')
        assert result.message == "Payment failed"
        assert result.code is None
        assert result.description is None

    def test_code_only_gets_description(self):
        result = classify('{"status":"failed","err_no":"6"}')
        assert result.code == "6"
        assert "abandoned" in result.description
        assert result.message == result.description

    def test_json_array_is_error(self):
        result = classify("[1, 2]")
        assert result.status is ResultStatus.ERROR
        assert result.message == "Payment failed"

    def test_kind_is_carried(self):
        result = classify('{"status":"success"}', OperationKind.PREPARE_PAYMENT)
        assert result.kind is OperationKind.PREPARE_PAYMENT


# ============== JSON API responses ==============

class TestApiClassification:

    def test_bin_query_success(self):
        body = json.dumps(
            {
                "status": "success",
                "issuer_name": "Yapi Kredi",
                "card_type": "credit",
                "card_family": "world",
                "bin": "979203",
                "country": "TR",
            }
        )
        result = classify(body, OperationKind.BIN_QUERY)
        assert isinstance(result, BinQueryResult)
        assert result.ok
        assert result.issuer_name == "Yapi Kredi"
        assert result.card_family == "world"
        assert result.country == "TR"

    def test_refund_success(self):
        body = '{"status":"success","merchant_oid":"ORDER-1","return_amount":"50.00","is_test":1}'
        result = classify(body, OperationKind.REFUND)
        assert isinstance(result, RefundResult)
        assert result.return_amount == "50.00"
        assert result.is_test is True

    def test_refund_error_description(self):
        body = '{"status":"error","err_no":"009","err_msg":"Tutar hatali"}'
        result = classify(body, OperationKind.REFUND)
        assert result.status is ResultStatus.ERROR
        assert result.message == "Tutar hatali"
        assert result.code == "009"
        assert result.description == "Total refund amount cannot exceed the payment amount."

    def test_numeric_error_code_is_text(self):
        result = classify('{"status":"error","err_no":4}', OperationKind.ORDER_STATUS)
        assert result.code == "4"
        assert result.description == "Unknown error code: 4"

    def test_order_status_success(self):
        body = json.dumps(
            {
                "status": "success",
                "merchant_oid": "ORDER-1",
                "payment_status": "success",
                "payment_amount": "100.99",
                "currency": "TL",
                "payment_type": "card",
                "test_mode": "0",
            }
        )
        result = classify(body, OperationKind.ORDER_STATUS)
        assert isinstance(result, OrderStatusResult)
        assert result.payment_status == "success"
        assert result.test_mode is False

    def test_transaction_log(self):
        body = json.dumps(
            {
                "status": "success",
                "transactions": [
                    {"merchant_oid": "A", "status": "success", "amount": "10.00", "currency": "TL"},
                    "garbage",
                ],
            }
        )
        result = classify(body, OperationKind.TRANSACTION_LOG)
        assert isinstance(result, TransactionLogResult)
        assert len(result.transactions) == 1
        assert result.transactions[0].merchant_oid == "A"
        assert result.transactions[0].date is None

    def test_card_list(self):
        body = json.dumps(
            {
                "status": "success",
                "cards": [
                    {
                        "ctoken": "CTOKEN-1",
                        "c_last_four": "4358",
                        "c_first_six": "435508",
                        "card_family": "world",
                        "bank_name": "Yapi Kredi",
                        "require_cvv": "1",
                    }
                ],
            }
        )
        result = classify(body, OperationKind.LIST_CARDS)
        assert isinstance(result, CardListResult)
        card = result.cards[0]
        assert card.ctoken == "CTOKEN-1"
        assert card.last_four == "4358"
        assert card.require_cvv is True

    def test_empty_card_list(self):
        result = classify('{"status":"success"}', OperationKind.LIST_CARDS)
        assert result.cards == ()

    def test_installment_rates_drop_status(self):
        body = '{"status":"success","oranlar":{"world":{"taksit_2":"2.5"}},"max_inst_non_bus":12}'
        result = classify(body, OperationKind.INSTALLMENT_RATES)
        assert isinstance(result, InstallmentRatesResult)
        assert "status" not in result.rates
        assert result.rates["max_inst_non_bus"] == 12

    def test_failed_without_message(self):
        result = classify('{"status":"failed"}', OperationKind.DELETE_CARD)
        assert result.status is ResultStatus.ERROR
        assert result.message == "Unknown error"
        assert result.description is None

    def test_non_json_raises(self):
        with pytest.raises(ResponseParseError) as exc_info:
            classify("<html>maintenance</html>", OperationKind.BIN_QUERY)
        assert exc_info.value.raw_body == "<html>maintenance</html>"
        assert exc_info.value.code == "PARSE_ERROR"

    def test_json_scalar_raises(self):
        with pytest.raises(ResponseParseError):
            classify('"success"', OperationKind.REFUND)

    def test_callback_kind_cannot_be_classified(self):
        with pytest.raises(ValueError):
            classify("OK", OperationKind.VERIFY_CALLBACK)
