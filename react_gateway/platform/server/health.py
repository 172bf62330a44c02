"""
HTTP health check state and service metadata.
"""

import datetime
import os
import platform
import socket
import threading
import time
from typing import Any

from react_gateway.platform.constants import SERVICE_NAME

__all__ = ["HealthCheck", "MetadataManager", "metadata"]


class HealthCheck:
    """Thread-safe health check state manager.

    Uses a threading.Event to manage health check state, allowing
    the service to be gracefully drained during shutdown.
    """

    _health_check_enabled = threading.Event()

    @staticmethod
    def enable() -> None:
        """Enable health checks (mark service as healthy)."""
        HealthCheck._health_check_enabled.set()

    @staticmethod
    def disable() -> None:
        """Disable health checks (mark service as unhealthy for graceful shutdown)."""
        HealthCheck._health_check_enabled.clear()

    @staticmethod
    def status() -> bool:
        return HealthCheck._health_check_enabled.is_set()


class MetadataManager:
    """Static container metadata plus uptime, served by ``/info``.

    Extra static entries can be added through ``metadata.update``.
    """

    # keys to read from the environment
    ENV_INFO_KEYS = [
        "BUILD_DATE",
        "BUILD_VERSION",
        "GIT_COMMIT",
        "IMAGE_NAME",
        "SERVICE_ID",
    ]

    def __init__(self):
        self._started_at = datetime.datetime.now(tz=datetime.UTC).isoformat()
        self._started_ts = time.monotonic()
        self.metadata: dict[str, Any] = {key.lower(): os.environ.get(key) for key in self.ENV_INFO_KEYS}
        self.metadata["service_name"] = SERVICE_NAME
        self.metadata["hostname"] = socket.gethostname()
        self.metadata["os_version"] = platform.platform()
        self.metadata["python_version"] = platform.python_version()

    def update(self, **entries: Any) -> None:
        self.metadata.update(entries)

    def info(self) -> dict[str, Any]:
        """
        Return metadata about the container and some basic stats
        """
        return {
            **self.metadata,
            "started": self._started_at,
            "uptime_seconds": round(time.monotonic() - self._started_ts, 3),
        }


metadata = MetadataManager()
