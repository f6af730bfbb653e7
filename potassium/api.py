"""Boundary operations used by the front end.

Each call takes the text values a user interface hands over (a port number
or ``"ALL"``, a script body or ``"NULL"``) and returns a plain status value.
The ``*_outcome`` variants return the structured result instead so callers
can decide how to present it.
"""

from __future__ import annotations

from potassium.config.env_profiles import ATTACH_PROFILE, CHECK_PROFILE, DELIVERY_PROFILE
from potassium.port_config import load_profile, parse_payload, parse_port, parse_selector
from potassium.tools import port_probe
from potassium.tools.delivery import DeliveryOutcome, resolve_and_deliver


def deliver_outcome(payload: str | bytes | None, target: str | int) -> DeliveryOutcome:
    """Send *payload* to *target*.

    Raises ``ValueError`` only when *target* is not ``"ALL"`` or a valid port.
    """

    selector = parse_selector(target)
    return resolve_and_deliver(parse_payload(payload), selector, load_profile(DELIVERY_PROFILE))


def deliver(payload: str | bytes | None, target: str | int) -> str:
    return deliver_outcome(payload, target).render()


def attach_outcome() -> port_probe.AttachResult:
    return port_probe.attach(load_profile(ATTACH_PROFILE))


def attach() -> str:
    return attach_outcome().render()


def attach_to_port_outcome(port: str | int) -> DeliveryOutcome:
    return port_probe.attach_to_port(parse_port(port), load_profile(ATTACH_PROFILE))


def attach_to_port(port: str | int) -> str:
    return attach_to_port_outcome(port).render()


def check(port: str | int) -> bool:
    return port_probe.check_port(parse_port(port), load_profile(CHECK_PROFILE))


def detach(port: str | int) -> str:
    return port_probe.detach(parse_port(port))


def port_status() -> dict[int, bool]:
    """Reachability of every candidate port."""

    return port_probe.scan_ports(profile=load_profile(CHECK_PROFILE))
