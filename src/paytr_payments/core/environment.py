"""
Layered environment used to configure the PayTR helpers.

Values come from the process environment (or an explicit ``base`` mapping),
are topped up from an optional ``.env`` file and finally replaced by explicit
overrides. The result is a read-only :class:`GatewayEnvironment` with typed
accessors for the handful of flags and numbers the configuration needs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from .errors import ConfigError

__all__ = ["GatewayEnvironment", "build_environment", "read_env_file"]

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def read_env_file(path: str) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` lines from ``path``.

    Blank lines and ``#`` comments are skipped, an ``export`` prefix is
    accepted and matching surrounding quotes are stripped. A missing file
    yields an empty mapping.
    """
    values: Dict[str, str] = {}
    try:
        data = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = _unquote(value.strip())
    return values


@dataclass(frozen=True)
class GatewayEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def require(self, key: str) -> str:
        value = self.variables.get(key, "").strip()
        if not value:
            raise ConfigError(f"{key} must be provided")
        return value

    def flag(self, key: str, default: bool = False) -> bool:
        raw = self.variables.get(key)
        if raw is None:
            return default
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"{key} must be a boolean flag, got '{raw}'")

    def integer(self, key: str, default: int) -> int:
        raw = self.variables.get(key)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise ConfigError(f"{key} must be an integer, got '{raw}'") from exc


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> GatewayEnvironment:
    """
    ``base`` defaults to :data:`os.environ`. Set ``env_file`` to ``None`` to
    skip file loading. ``overrides`` always win.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in read_env_file(env_file).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return GatewayEnvironment(variables=merged)
