"""Runtime configuration read from the environment."""

from __future__ import annotations

import logging
import os
import re
from typing import Mapping

DEFAULT_PORT = 8080

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

logger = logging.getLogger(__name__)


def get_app_port(environ: Mapping[str, str] | None = None) -> int:
    """Return the port from APP_PORT, falling back to the default when unset or invalid."""
    env = os.environ if environ is None else environ
    port_str = env.get("APP_PORT", "")
    if port_str == "":
        return DEFAULT_PORT
    if _INTEGER.fullmatch(port_str):
        port = int(port_str)
        if _INT64_MIN <= port <= _INT64_MAX:
            return port
    logger.warning(
        "Invalid app port %r. Service will use default port: %d", port_str, DEFAULT_PORT
    )
    return DEFAULT_PORT