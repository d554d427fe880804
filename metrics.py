"""Request metrics for the signing service."""

import threading
import time
from typing import Any, Dict


class MetricsManager:
    """Singleton class managing runtime metrics."""

    _instance = None

    def __new__(cls) -> "MetricsManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init()
        return cls._instance

    def _init(self) -> None:
        self.start = time.time()
        self.signed_count = 0
        self.client_error_count = 0
        self.server_error_count = 0
        self.lock = threading.Lock()

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for tests)."""
        cls._instance = None

    def record_signed(self) -> None:
        with self.lock:
            self.signed_count += 1

    def record_client_error(self) -> None:
        with self.lock:
            self.client_error_count += 1

    def record_server_error(self) -> None:
        with self.lock:
            self.server_error_count += 1

    def snapshot(self) -> Dict[str, Any]:
        """Return metrics snapshot dict."""
        with self.lock:
            return {
                "uptime_sec": int(time.time() - self.start),
                "signed": self.signed_count,
                "client_errors": self.client_error_count,
                "server_errors": self.server_error_count,
            }


def get_metrics() -> MetricsManager:
    """Return the singleton metrics manager."""
    return MetricsManager()
