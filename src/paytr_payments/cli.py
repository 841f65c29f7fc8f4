"""
Command-line interface for exercising the PayTR gateway APIs.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from datetime import datetime
from typing import Iterable, Sequence, Tuple

import requests

from .api import create_paytr_client
from .core.callback import callback_reply
from .core.client import PayTRClient
from .core.config import load_gateway_config
from .core.errors import (
    ConfigError,
    ResponseParseError,
    TransportError,
    ValidationError,
)
from .core.responses import OperationResult


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _key_value(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Values must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Key must not be empty")
    return key, val


def _iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"'{value}' is not an ISO date such as 2024-01-31 or 2024-01-31T12:00:00"
        ) from exc


def _collect_pairs(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    collected: dict[str, str] = {}
    for key, value in pairs:
        collected[key] = value
    return collected


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paytr-payments",
        description="Call a single PayTR gateway operation",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYTR_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_key_value,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    bin_parser = commands.add_parser("bin", help="Look up the issuer of a card BIN")
    bin_parser.add_argument("bin_number", help="First 6 or 8 digits of the card")

    status_parser = commands.add_parser("order-status", help="Query the status of an order")
    status_parser.add_argument("merchant_oid")

    refund_parser = commands.add_parser("refund", help="Refund all or part of a payment")
    refund_parser.add_argument("merchant_oid")
    refund_parser.add_argument("amount", help="Refund amount in major units, e.g. 49.90")
    refund_parser.add_argument("--reference-no", default=None)

    log_parser = commands.add_parser("transactions", help="List transactions (max 3 days)")
    log_parser.add_argument("start", type=_iso_datetime)
    log_parser.add_argument("end", type=_iso_datetime)

    cards_parser = commands.add_parser("cards", help="List the stored cards of a user")
    cards_parser.add_argument("utoken")

    delete_parser = commands.add_parser("delete-card", help="Delete a stored card")
    delete_parser.add_argument("utoken")
    delete_parser.add_argument("ctoken")

    rates_parser = commands.add_parser("installments", help="Fetch installment rates")
    rates_parser.add_argument("--request-id", default=None)

    callback_parser = commands.add_parser(
        "verify-callback",
        help="Check the hash of a callback and print the reply PayTR expects",
    )
    callback_parser.add_argument(
        "fields",
        nargs="+",
        type=_key_value,
        metavar="KEY=VALUE",
        help="Callback fields, e.g. merchant_oid=... status=... total_amount=... hash=...",
    )
    return parser


def _dispatch(client: PayTRClient, args: argparse.Namespace) -> OperationResult:
    if args.command == "bin":
        return client.query_bin(args.bin_number)
    if args.command == "order-status":
        return client.get_order_status(args.merchant_oid)
    if args.command == "refund":
        return client.refund(args.merchant_oid, args.amount, reference_no=args.reference_no)
    if args.command == "transactions":
        return client.get_transactions(args.start, args.end)
    if args.command == "cards":
        return client.list_cards(args.utoken)
    if args.command == "delete-card":
        return client.delete_card(args.utoken, args.ctoken)
    if args.command == "installments":
        return client.get_installment_rates(request_id=args.request_id)
    raise ValueError(f"Unknown command '{args.command}'")


def _render(result: OperationResult) -> str:
    data = dataclasses.asdict(result)
    data.pop("raw", None)
    data.pop("raw_body", None)
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_pairs(args.set or ())

    try:
        config = load_gateway_config(env_file=args.env_file, overrides=overrides)
    except (KeyError, ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    if args.command == "verify-callback":
        client = create_paytr_client(config=config)
        is_valid = client.verify_callback(_collect_pairs(args.fields))
        print(callback_reply(is_valid))
        return 0 if is_valid else 1

    client = create_paytr_client(config=config, session=requests.Session())

    try:
        result = _dispatch(client, args)
    except ValidationError as exc:
        logging.error("Invalid parameters: %s", exc)
        return 1
    except (TransportError, ResponseParseError) as exc:
        logging.error("Request failed: %s", exc)
        return 1

    print(_render(result))
    return _handle_result(result)


def _handle_result(result: OperationResult) -> int:
    if not result.ok:
        logging.error(
            "PayTR reported an error for %s: %s (code %s)",
            result.kind.value,
            result.message,
            result.code,
        )
        return 1

    logging.info("PayTR %s request succeeded", result.kind.value)
    return 0
