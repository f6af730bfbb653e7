"""Centralized configuration defaults for Potassium.

This package consolidates the port list, sentinels and timeouts so the
delivery code and the command line front end share one source of truth.
"""

from .defaults import (
    ALL_PORTS_SELECTOR,
    CANDIDATE_PORTS,
    DEFAULT_CHECK_TIMEOUT_MS,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_HOST,
    PROBE_PAYLOAD,
    SCRIPT_SUFFIXES,
)
from .env_profiles import (
    ATTACH_PROFILE,
    CHECK_PROFILE,
    DEFAULT_PROFILE,
    DELIVERY_PROFILE,
    DeliveryProfile,
    ScanMode,
)

__all__ = [
    "ALL_PORTS_SELECTOR",
    "ATTACH_PROFILE",
    "CANDIDATE_PORTS",
    "CHECK_PROFILE",
    "DEFAULT_CHECK_TIMEOUT_MS",
    "DEFAULT_CONNECT_TIMEOUT_MS",
    "DEFAULT_HOST",
    "DEFAULT_PROFILE",
    "DELIVERY_PROFILE",
    "PROBE_PAYLOAD",
    "SCRIPT_SUFFIXES",
    "DeliveryProfile",
    "ScanMode",
]
