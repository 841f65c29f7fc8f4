"""
Public facade for the PayTR payment gateway helper package.

The module re-exports the pieces integrators need so they can
``from paytr_payments import ...`` without navigating the package.
"""

from .api import create_paytr_client
from .core import (
    CALLBACK_INVALID_HASH,
    CALLBACK_OK,
    BasketItem,
    CallbackPayload,
    CardInfo,
    ConfigError,
    GatewayConfig,
    GatewayParameters,
    MerchantCredentials,
    OperationKind,
    OperationResult,
    PayTRClient,
    PayTRError,
    PaymentOptions,
    PreparedPayment,
    RecurringPaymentOptions,
    RequestsTransport,
    ResponseParseError,
    ResultStatus,
    SaveCardPaymentOptions,
    StoredCardPaymentOptions,
    TransportError,
    UserInfo,
    ValidationError,
    callback_reply,
    describe_error,
    load_gateway_config,
    verify_callback,
)

__all__ = (
    "BasketItem",
    "CALLBACK_INVALID_HASH",
    "CALLBACK_OK",
    "CallbackPayload",
    "CardInfo",
    "ConfigError",
    "GatewayConfig",
    "GatewayParameters",
    "MerchantCredentials",
    "OperationKind",
    "OperationResult",
    "PayTRClient",
    "PayTRError",
    "PaymentOptions",
    "PreparedPayment",
    "RecurringPaymentOptions",
    "RequestsTransport",
    "ResponseParseError",
    "ResultStatus",
    "SaveCardPaymentOptions",
    "StoredCardPaymentOptions",
    "TransportError",
    "UserInfo",
    "ValidationError",
    "callback_reply",
    "create_paytr_client",
    "describe_error",
    "load_gateway_config",
    "verify_callback",
)
