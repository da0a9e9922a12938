"""Network reachability probes.

The pipeline asks the probe once per resolution that would reach the engine
chain. When the probe reports no connectivity, translation is skipped rather
than attempted and failed.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import socket
from typing import Protocol

from dyntranslator.constants import CONNECTIVITY_HOST, CONNECTIVITY_PORT, CONNECTIVITY_TIMEOUT

__all__ = ["ConnectivityProbe", "SocketConnectivityProbe", "StaticConnectivityProbe"]

logger = logging.getLogger(__name__)


class ConnectivityProbe(Protocol):
    """Protocol reporting whether network access is currently available."""

    def is_connected(self) -> bool: ...


class SocketConnectivityProbe:
    """Checks reachability with a short TCP connect.

    Attributes:
        host: Host to connect to (a public DNS resolver by default)
        port: TCP port
        timeout: Connect timeout in seconds
    """

    __slots__ = ("host", "port", "timeout")

    def __init__(
        self,
        host: str = CONNECTIVITY_HOST,
        port: int = CONNECTIVITY_PORT,
        timeout: float = CONNECTIVITY_TIMEOUT,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    def is_connected(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError as e:
            logger.debug("No connectivity to %s:%d: %s", self.host, self.port, e)
            return False


class StaticConnectivityProbe:
    """Probe with a fixed answer, for offline-first apps and tests.

    Attributes:
        connected: Value returned by is_connected()
    """

    __slots__ = ("connected",)

    def __init__(self, connected: bool = True) -> None:
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected
