"""Potassium: deliver scripts to a locally running Opiumware instance.

The package is split the same way the command line front end uses it:

* :mod:`potassium.config` holds the candidate ports, sentinels and profiles.
* :mod:`potassium.tools.delivery` resolves targets and writes payloads.
* :mod:`potassium.tools.port_probe` provides attach and port checks.
* :mod:`potassium.api` exposes the text-in, status-out boundary calls.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
