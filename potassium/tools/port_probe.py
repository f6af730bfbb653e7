"""端口探活。Liveness probes for the Opiumware listeners."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from potassium.config.env_profiles import ATTACH_PROFILE, CHECK_PROFILE, DeliveryProfile
from potassium.logging_utils import get_logger
from potassium.port_config import PortSelector
from potassium.tools import delivery
from potassium.tools.delivery import ConnectFailure, DeliveryOutcome, resolve_and_deliver

LOGGER = get_logger(__name__)


def _port_range(ports: Iterable[int]) -> str:
    ordered = tuple(ports)
    if not ordered:
        return "(none)"
    if len(ordered) == 1:
        return str(ordered[0])
    return f"{min(ordered)}-{max(ordered)}"


@dataclass(frozen=True)
class AttachResult:
    """附加结果。Result of an attach scan."""

    port: int | None
    ports_scanned: tuple[int, ...]
    outcome: DeliveryOutcome

    @property
    def ok(self) -> bool:
        return self.port is not None

    def render(self) -> str:
        if self.port is not None:
            return f"Successfully attached on port {self.port}"
        return (
            "Failed to attach: no Opiumware instance found on ports "
            f"{_port_range(self.ports_scanned)}"
        )


def check_port(port: int, profile: DeliveryProfile | None = None) -> bool:
    """Return ``True`` if a listener accepts a connection on *port*."""

    profile = profile or CHECK_PROFILE
    try:
        sock = delivery.open_connection(profile.host, port, profile.timeout_s)
    except ConnectFailure as exc:
        LOGGER.debug("Port check failed", extra={"port": port, "error": str(exc)})
        return False
    delivery.close_connection(sock)
    return True


def scan_ports(
    ports: Iterable[int] | None = None,
    profile: DeliveryProfile | None = None,
) -> dict[int, bool]:
    """Check every port in order and map it to its reachability."""

    profile = profile or CHECK_PROFILE
    targets = tuple(ports) if ports is not None else profile.ports
    return {port: check_port(port, profile) for port in targets}


def attach(profile: DeliveryProfile | None = None) -> AttachResult:
    """Scan the candidate ports and stop at the first reachable one."""

    profile = profile or ATTACH_PROFILE
    outcome = resolve_and_deliver(None, PortSelector.ALL, profile)
    port = outcome.success_ports[0] if outcome.success_ports else None
    if port is None:
        LOGGER.warning("No Opiumware instance found", extra={"ports": list(profile.ports)})
    else:
        LOGGER.info("Attached", extra={"port": port})
    return AttachResult(port=port, ports_scanned=profile.ports, outcome=outcome)


def attach_to_port(port: int, profile: DeliveryProfile | None = None) -> DeliveryOutcome:
    """Probe one concrete port without sending anything."""

    return resolve_and_deliver(None, port, profile or ATTACH_PROFILE)


def detach(port: int) -> str:
    """Release a port.

    Connections are never held between calls, so there is nothing to close;
    the call only reports the state change to the caller.
    """

    LOGGER.info("Detached", extra={"port": port})
    return f"Detached from port {port}"
