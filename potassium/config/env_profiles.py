"""Delivery profile scaffolding.

Profiles describe the variations between the delivery entry points (connect
timeout, whether a scan stops at the first reachable port) without changing
call sites.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .defaults import (
    CANDIDATE_PORTS,
    DEFAULT_CHECK_TIMEOUT_MS,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_HOST,
)


class ScanMode(str, Enum):
    """扫描模式。How a multi-port scan treats successes."""

    EARLY_EXIT = "early_exit"  # 首个成功即停止
    FULL_SCAN = "full_scan"  # 尝试全部端口


@dataclass(frozen=True)
class DeliveryProfile:
    """Collection of parameters for one delivery entry point."""

    name: str
    host: str
    ports: Tuple[int, ...]
    timeout_ms: int
    scan_mode: ScanMode

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    def with_overrides(self, **changes) -> "DeliveryProfile":
        """Return a copy with the given fields replaced."""

        return replace(self, **changes)


DELIVERY_PROFILE = DeliveryProfile(
    name="deliver",
    host=DEFAULT_HOST,
    ports=CANDIDATE_PORTS,
    timeout_ms=DEFAULT_CONNECT_TIMEOUT_MS,
    scan_mode=ScanMode.FULL_SCAN,
)

ATTACH_PROFILE = DeliveryProfile(
    name="attach",
    host=DEFAULT_HOST,
    ports=CANDIDATE_PORTS,
    timeout_ms=DEFAULT_CONNECT_TIMEOUT_MS,
    scan_mode=ScanMode.EARLY_EXIT,
)

CHECK_PROFILE = DeliveryProfile(
    name="check",
    host=DEFAULT_HOST,
    ports=CANDIDATE_PORTS,
    timeout_ms=DEFAULT_CHECK_TIMEOUT_MS,
    scan_mode=ScanMode.EARLY_EXIT,
)

DEFAULT_PROFILE = DELIVERY_PROFILE
