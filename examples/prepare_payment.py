"""
Minimal script that uses the public API to sign a PayTR payment form.

The printed HTML can be saved to a file and opened in a browser to reach the
hosted payment page.
"""

from __future__ import annotations

import argparse
import html
import logging
import sys
import uuid
from decimal import Decimal
from typing import Iterable, Tuple

from paytr_payments import (
    BasketItem,
    ConfigError,
    PaymentOptions,
    UserInfo,
    ValidationError,
    create_paytr_client,
    load_gateway_config,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Prepare a PayTR payment form using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYTR_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--email", default="customer@example.com")
    parser.add_argument("--amount", default="100.99", help="Amount in major units (e.g. 100.99)")
    parser.add_argument("--currency", default="TL", choices=("TL", "USD", "EUR"))
    parser.add_argument("--installments", type=int, default=0)
    parser.add_argument("--user-ip", default="127.0.0.1")
    parser.add_argument("--ok-url", default="https://example.com/payment/success")
    parser.add_argument("--fail-url", default="https://example.com/payment/failed")
    parser.add_argument("--test-mode", action="store_true", help="Sign the form in test mode")
    return parser.parse_args()


def _render_form(action: str, fields: dict[str, str]) -> str:
    inputs = "\n".join(
        f'  <input type="hidden" name="{html.escape(name)}" value="{html.escape(value)}">'
        for name, value in fields.items()
    )
    return f'<form action="{html.escape(action)}" method="post">\n{inputs}\n  <button>Pay</button>\n</form>'


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    overrides = _build_overrides(args.set or ())

    try:
        config = load_gateway_config(
            env_file=args.env_file,
            overrides=overrides,
            test_mode=True if args.test_mode else None,
        )
    except (KeyError, ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_paytr_client(config=config)
    merchant_oid = f"ORDER{uuid.uuid4().hex[:16].upper()}"
    amount = Decimal(args.amount)

    options = PaymentOptions(
        merchant_oid=merchant_oid,
        email=args.email,
        payment_amount=amount,
        currency=args.currency,
        basket_items=[BasketItem(name="Sample product", price=amount, quantity=1)],
        user=UserInfo(name="Sample Customer", address="Sample Street 1, Istanbul", phone="05551234567"),
        merchant_ok_url=args.ok_url,
        merchant_fail_url=args.fail_url,
        user_ip=args.user_ip,
        installment_count=args.installments,
    )

    try:
        payment = client.prepare_payment(options)
    except ValidationError as exc:
        logging.error("Invalid payment parameters: %s", exc)
        return 1

    logging.info("Prepared payment form for order %s", merchant_oid)
    print(_render_form(payment.form_action, payment.form_data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
