"""
Configuration objects and helpers for the PayTR client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .constants import DEFAULT_LANGUAGE, DEFAULT_TIMEOUT_SECONDS, SUPPORTED_LANGUAGES
from .environment import GatewayEnvironment, build_environment
from .errors import ConfigError
from .models import MerchantCredentials

__all__ = [
    "GatewayConfig",
    "GatewayParameters",
    "load_gateway_config",
]

_PARAMETER_TO_ENV_KEY = {
    "merchant_id": "PAYTR_MERCHANT_ID",
    "merchant_key": "PAYTR_MERCHANT_KEY",
    "merchant_salt": "PAYTR_MERCHANT_SALT",
    "test_mode": "PAYTR_TEST_MODE",
    "debug_mode": "PAYTR_DEBUG_MODE",
    "language": "PAYTR_LANGUAGE",
    "timeout_seconds": "PAYTR_TIMEOUT_SECONDS",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class GatewayParameters:
    """
    Explicit parameter bundle for constructing :class:`GatewayConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_gateway_config`.
    """

    merchant_id: Optional[str] = None
    merchant_key: Optional[str] = None
    merchant_salt: Optional[str] = None
    test_mode: Optional[bool] = None
    debug_mode: Optional[bool] = None
    language: Optional[str] = None
    timeout_seconds: Optional[int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[GatewayParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown gateway parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


@dataclass(frozen=True)
class GatewayConfig:
    credentials: MerchantCredentials
    test_mode: bool = False
    debug_mode: bool = False
    language: str = DEFAULT_LANGUAGE
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.language not in SUPPORTED_LANGUAGES:
            raise ConfigError(
                f"PAYTR_LANGUAGE must be one of {sorted(SUPPORTED_LANGUAGES)}, got '{self.language}'"
            )
        if self.timeout_seconds <= 0:
            raise ConfigError("PAYTR_TIMEOUT_SECONDS must be greater than zero")

    @property
    def merchant_id(self) -> str:
        return self.credentials.merchant_id

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "GatewayConfig":
        environment = GatewayEnvironment(variables=dict(values))
        credentials = MerchantCredentials(
            merchant_id=environment.require("PAYTR_MERCHANT_ID"),
            merchant_key=environment.require("PAYTR_MERCHANT_KEY"),
            merchant_salt=environment.require("PAYTR_MERCHANT_SALT"),
        )
        language = (environment.get("PAYTR_LANGUAGE") or DEFAULT_LANGUAGE).strip().lower()

        return cls(
            credentials=credentials,
            test_mode=environment.flag("PAYTR_TEST_MODE"),
            debug_mode=environment.flag("PAYTR_DEBUG_MODE"),
            language=language,
            timeout_seconds=environment.integer(
                "PAYTR_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
            ),
        )

    @classmethod
    def from_env(
        cls,
        *,
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
    ) -> "GatewayConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "merchant_id": merchant_id,
                "merchant_key": merchant_key,
                "merchant_salt": merchant_salt,
                "test_mode": test_mode,
                "debug_mode": debug_mode,
                "language": language,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_gateway_config(
    *,
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
) -> GatewayConfig:
    """
    Convenience wrapper that mirrors :meth:`GatewayConfig.from_env`.

    The configuration can be provided entirely through ``PAYTR_*`` environment
    variables, a ``.env`` file, direct keyword arguments, or any combination
    of the three.
    """
    return GatewayConfig.from_env(
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
