"""
Core primitives that implement the PayTR signing and request lifecycle.
"""

from .callback import (
    CALLBACK_INVALID_HASH,
    CALLBACK_OK,
    CallbackPayload,
    callback_reply,
    compute_callback_hash,
    verify_callback,
)
from .canonical import (
    CanonicalString,
    canonicalize,
    encode_bool,
    format_basket,
    format_date,
    generate_request_id,
    to_decimal_string,
    to_minor_units,
)
from .client import PayTRClient, RequestsTransport, Transport
from .config import GatewayConfig, GatewayParameters, load_gateway_config
from .constants import ENDPOINTS, OperationKind
from .environment import GatewayEnvironment, build_environment, read_env_file
from .error_codes import describe_error
from .errors import (
    ConfigError,
    PayTRError,
    ResponseParseError,
    TransportError,
    ValidationError,
)
from .models import (
    BasketItem,
    CardInfo,
    MerchantCredentials,
    PaymentOptions,
    PreparedPayment,
    RecurringPaymentOptions,
    SaveCardPaymentOptions,
    StoredCardPaymentOptions,
    UserInfo,
)
from .payloads import build_payment_form, build_signed_fields
from .responses import OperationResult, ResultStatus, classify
from .signing import sign

__all__ = [
    "BasketItem",
    "CALLBACK_INVALID_HASH",
    "CALLBACK_OK",
    "CallbackPayload",
    "CanonicalString",
    "CardInfo",
    "ConfigError",
    "ENDPOINTS",
    "GatewayConfig",
    "GatewayEnvironment",
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
    "Transport",
    "TransportError",
    "UserInfo",
    "ValidationError",
    "build_environment",
    "build_payment_form",
    "build_signed_fields",
    "callback_reply",
    "canonicalize",
    "classify",
    "compute_callback_hash",
    "describe_error",
    "encode_bool",
    "format_basket",
    "format_date",
    "generate_request_id",
    "load_gateway_config",
    "read_env_file",
    "sign",
    "to_decimal_string",
    "to_minor_units",
    "verify_callback",
]
