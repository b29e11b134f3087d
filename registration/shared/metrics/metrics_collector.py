import threading
from typing import Dict

from registration.shared.logger import JohnWickLogger


class MetricsCollector:
    """
    Simple metrics collector to track counters across components.
    Supports thread-safe increments and structured logging via injected logger.
    """
    def __init__(self, logger: JohnWickLogger):
        self.logger = logger
        self._counters: Dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, key: str, amount: int = 1):
        """Increment a metric counter"""
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + amount

    def get(self, key: str) -> int:
        """Get the current value of a metric"""
        with self._lock:
            return self._counters.get(key, 0)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def report(self):
        """Emit structured log of current metrics"""
        counters = self.snapshot()
        if counters:
            self.logger.info("Metrics update", extra=counters)
