"""用于解析目标端口与连接参数的实用函数。Helpers for resolving target ports and connection settings."""
from __future__ import annotations

import os
from enum import Enum
from typing import Optional, Union

from potassium.config.defaults import (
    ALL_PORTS_SELECTOR,
    DEFAULT_HOST,
    PROBE_PAYLOAD,
)
from potassium.config.env_profiles import DeliveryProfile
from potassium.logging_utils import get_logger

LOGGER = get_logger(__name__)

TIMEOUT_ENV_KEYS = ("POTASSIUM_CONNECT_TIMEOUT_MS",)
HOST_ENV_KEYS = ("POTASSIUM_HOST",)


class PortSelector(str, Enum):
    """Sentinel selectors that are not a single concrete port."""

    ALL = ALL_PORTS_SELECTOR


TargetSelector = Union[int, PortSelector]


def _parse_port(value: str, *, source: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise ValueError(f"{source} must be an integer port number, got {value!r}") from exc

    if not 1 <= port <= 65535:
        raise ValueError(f"{source} value {port} is outside the valid range (1-65535).")
    return port


def parse_port(value: str | int) -> int:
    """Parse a single concrete port given as text or integer."""

    if isinstance(value, int):
        return _parse_port(str(value), source="port")
    return _parse_port(value.strip(), source="port")


def parse_selector(value: str | int | PortSelector) -> TargetSelector:
    """Turn the caller's target text (``"ALL"`` or a port) into a selector."""

    if isinstance(value, PortSelector):
        return value
    if isinstance(value, str) and value.strip().upper() == ALL_PORTS_SELECTOR:
        return PortSelector.ALL
    return parse_port(value)


def parse_payload(value: str | bytes | None) -> Optional[bytes]:
    """Return the payload bytes, or ``None`` for a probe-only request."""

    if value is None:
        return None
    if isinstance(value, bytes):
        return value
    if value == PROBE_PAYLOAD:
        return None
    return value.encode("utf-8")


def _first_env(keys: tuple[str, ...]) -> tuple[str, str] | None:
    for key in keys:
        value = os.environ.get(key)
        if value:
            return value, key
    return None


def resolve_connect_timeout_ms(default: int) -> int:
    """Return the connect timeout in milliseconds, honoring env overrides.

    A non-empty ``POTASSIUM_CONNECT_TIMEOUT_MS`` must hold a positive integer;
    any other value is logged and *default* is used instead.
    """

    found = _first_env(TIMEOUT_ENV_KEYS)
    if found is None:
        return default

    value, key = found
    try:
        timeout_ms = int(value)
    except ValueError:
        timeout_ms = 0
    if timeout_ms <= 0:
        LOGGER.warning(
            "Ignoring invalid connect timeout from env",
            extra={"value": value, "source": key, "timeout_ms": default},
        )
        return default

    LOGGER.debug("Using connect timeout from env", extra={"timeout_ms": timeout_ms, "source": key})
    return timeout_ms


def resolve_host(default: str = DEFAULT_HOST) -> str:
    """Return the listener host, honoring ``POTASSIUM_HOST``."""

    found = _first_env(HOST_ENV_KEYS)
    if found is None:
        return default
    host, key = found
    LOGGER.debug("Using host from env", extra={"host": host, "source": key})
    return host.strip()


def load_profile(base: DeliveryProfile) -> DeliveryProfile:
    """Return *base* with environment overrides applied."""

    return base.with_overrides(
        host=resolve_host(base.host),
        timeout_ms=resolve_connect_timeout_ms(base.timeout_ms),
    )
