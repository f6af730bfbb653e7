"""脚本投递解析器。Delivery resolver for the local Opiumware listeners.

A delivery call walks the candidate ports in their fixed order, opens a
short-lived loopback TCP connection to each, writes one zlib-compressed copy
of the script and closes the connection again. Per-port outcomes are folded
into a :class:`DeliveryOutcome` that renders to a single status line.
"""

from __future__ import annotations

import socket
import zlib
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from potassium.config.env_profiles import DELIVERY_PROFILE, DeliveryProfile, ScanMode
from potassium.logging_utils import get_logger
from potassium.port_config import PortSelector, TargetSelector

LOGGER = get_logger(__name__)


class DeliveryError(RuntimeError):
    """投递失败的基类。Base class for per-port delivery failures."""

    def __init__(self, port: int, message: str) -> None:
        super().__init__(message)
        self.port = port


class ConnectFailure(DeliveryError):
    """The port is not listening or did not answer within the timeout."""


class SendFailure(DeliveryError):
    """The connection was opened but the payload could not be written."""


class CompressionFailure(SendFailure):
    """The payload could not be compressed."""


@dataclass
class DeliveryAttempt:
    """单个端口的投递记录。Outcome of one port attempt."""

    port: int
    connected: bool = False
    sent: bool = False  # 仅在有载荷时有意义
    bytes_sent: int = 0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.connected and self.error is None


@dataclass(frozen=True)
class DeliveryOutcome:
    """Aggregate result of one resolution call."""

    success_ports: Tuple[int, ...] = ()
    last_error: str | None = None
    attempts: Tuple[DeliveryAttempt, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return bool(self.success_ports)

    def render(self) -> str:
        """Render the outcome as a human-readable status line."""

        if len(self.success_ports) == 1:
            return f"Successfully connected to Opiumware on port: {self.success_ports[0]}"
        if self.success_ports:
            joined = ", ".join(str(port) for port in self.success_ports)
            return f"Successfully executed on ports: {joined}"
        if self.last_error:
            return f"Failed to connect on all ports: {self.last_error}"
        return "Failed to connect on all ports"


def compress_payload(data: bytes) -> bytes:
    """Compress *data* into a zlib stream at the default compression level."""

    return zlib.compress(data)


def open_connection(host: str, port: int, timeout_s: float) -> socket.socket:
    """Open a TCP connection with a bounded connect timeout.

    Raises
    ------
    ConnectFailure
        When the port refuses, times out or is otherwise unreachable.
    """

    try:
        return socket.create_connection((host, port), timeout=timeout_s)
    except (OSError, OverflowError) as exc:
        raise ConnectFailure(port, f"Cannot connect to port {port}: {exc}") from exc


def send_payload(sock: socket.socket, port: int, data: bytes) -> int:
    """Compress *data* and write it to *sock* in one transmission.

    Returns the number of compressed bytes written.
    """

    try:
        compressed = compress_payload(data)
    except (zlib.error, TypeError) as exc:
        raise CompressionFailure(port, f"Error compressing script for port {port}: {exc}") from exc

    try:
        sock.sendall(compressed)
    except OSError as exc:
        raise SendFailure(port, f"Error sending to port {port}: {exc}") from exc
    return len(compressed)


def close_connection(sock: socket.socket) -> None:
    """Close *sock*, logging rather than raising if the close fails."""

    try:
        sock.close()
    except OSError as exc:
        LOGGER.debug("Socket close failed", extra={"error": str(exc)})


def resolve_ports(selector: TargetSelector, ports: Iterable[int]) -> Tuple[int, ...]:
    """Return the ordered ports a call with *selector* will attempt."""

    if selector is PortSelector.ALL:
        return tuple(ports)
    return (int(selector),)


def _attempt(profile: DeliveryProfile, port: int, payload: Optional[bytes]) -> DeliveryAttempt:
    attempt = DeliveryAttempt(port=port)
    LOGGER.debug("Connecting", extra={"host": profile.host, "port": port, "timeout_ms": profile.timeout_ms})
    try:
        sock = open_connection(profile.host, port, profile.timeout_s)
    except ConnectFailure as exc:
        attempt.error = str(exc)
        LOGGER.warning("Port unavailable", extra={"port": port, "error": attempt.error})
        return attempt

    attempt.connected = True
    try:
        if payload is not None:
            attempt.bytes_sent = send_payload(sock, port, payload)
            attempt.sent = True
            LOGGER.info("Script sent", extra={"port": port, "bytes": attempt.bytes_sent})
        else:
            LOGGER.info("Listener reachable", extra={"port": port})
    except SendFailure as exc:
        attempt.error = str(exc)
        LOGGER.warning("Script delivery failed", extra={"port": port, "error": attempt.error})
    finally:
        close_connection(sock)
    return attempt


def resolve_and_deliver(
    payload: Optional[bytes],
    selector: TargetSelector,
    profile: DeliveryProfile | None = None,
) -> DeliveryOutcome:
    """Deliver *payload* to the port(s) picked by *selector*.

    Parameters
    ----------
    payload:
        Script bytes, or ``None`` to only probe the connection.
    selector:
        A concrete port, or :attr:`PortSelector.ALL` for every candidate port.
    profile:
        Host, port list, timeout and scan mode. Defaults to
        :data:`DELIVERY_PROFILE` (full scan).

    A concrete port is attempted exactly once. With ``ALL`` every candidate
    port is attempted in order, unless the profile's scan mode is
    :attr:`ScanMode.EARLY_EXIT`, in which case the scan stops at the first
    success. Network failures never propagate; only the last error text is
    kept for the rendered status.
    """

    profile = profile or DELIVERY_PROFILE
    targets = resolve_ports(selector, profile.ports)

    success_ports: list[int] = []
    attempts: list[DeliveryAttempt] = []
    last_error: str | None = None

    for port in targets:
        attempt = _attempt(profile, port, payload)
        attempts.append(attempt)
        if attempt.succeeded:
            success_ports.append(port)
            if profile.scan_mode is ScanMode.EARLY_EXIT:
                break
        else:
            last_error = attempt.error

    outcome = DeliveryOutcome(
        success_ports=tuple(success_ports),
        last_error=last_error,
        attempts=tuple(attempts),
    )
    LOGGER.debug(
        "Delivery finished",
        extra={"profile": profile.name, "attempted": len(attempts), "succeeded": len(success_ports)},
    )
    return outcome
