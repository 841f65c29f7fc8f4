"""
Shared fixtures for the PayTR helper tests.

Every token asserted in the suite is signed with the credentials below.
"""
from decimal import Decimal
from typing import Dict, List, Mapping, Tuple

import pytest

from paytr_payments import (
    BasketItem,
    GatewayConfig,
    MerchantCredentials,
    PaymentOptions,
    PayTRClient,
    UserInfo,
)


class FakeTransport:
    """Records every POST and answers with a canned body."""

    def __init__(self, body: str = '{"status": "success"}') -> None:
        self.body = body
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    def send(self, url: str, fields: Mapping[str, str]) -> str:
        self.calls.append((url, dict(fields)))
        return self.body


@pytest.fixture
def credentials():
    return MerchantCredentials(
        merchant_id="123456",
        merchant_key="KEY123",
        merchant_salt="SALT456",
    )


@pytest.fixture
def config(credentials):
    return GatewayConfig(credentials=credentials, test_mode=True)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(config, transport):
    return PayTRClient(config, transport=transport)


@pytest.fixture
def payment_options():
    return PaymentOptions(
        merchant_oid="ORDER-1",
        email="buyer@example.com",
        payment_amount=Decimal("100.99"),
        basket_items=[BasketItem(name="Item", price=Decimal("100.99"), quantity=1)],
        user=UserInfo(name="Ayse Yilmaz", address="Istiklal Cd. 1, Istanbul", phone="05551234567"),
        merchant_ok_url="https://shop.example.com/ok",
        merchant_fail_url="https://shop.example.com/fail",
        user_ip="127.0.0.1",
    )
