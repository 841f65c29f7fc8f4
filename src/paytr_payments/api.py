"""
Public, high-level helpers for interacting with the PayTR gateway.
"""

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .core.client import PayTRClient, Transport
from .core.config import GatewayConfig, GatewayParameters, load_gateway_config

__all__ = [
    "create_paytr_client",
]


def create_paytr_client(
    *,
    config: Optional[GatewayConfig] = None,
    session: Optional[requests.Session] = None,
    transport: Optional[Transport] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[GatewayParameters] = None,
    merchant_id: Optional[str] = None,
    merchant_key: Optional[str] = None,
    merchant_salt: Optional[str] = None,
    test_mode: Optional[bool] = None,
    debug_mode: Optional[bool] = None,
    language: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
) -> PayTRClient:
    """
    Construct a :class:`PayTRClient`.

    Callers can either supply a ready-made :class:`GatewayConfig` or let the
    helper assemble one from ``PAYTR_*`` environment data and keyword
    arguments.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            merchant_id,
            merchant_key,
            merchant_salt,
            test_mode,
            debug_mode,
            language,
            timeout_seconds,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built GatewayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_gateway_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            merchant_id=merchant_id,
            merchant_key=merchant_key,
            merchant_salt=merchant_salt,
            test_mode=test_mode,
            debug_mode=debug_mode,
            language=language,
            timeout_seconds=timeout_seconds,
        )
    return PayTRClient(cfg, session=session, transport=transport)
