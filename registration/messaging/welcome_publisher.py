import asyncio
from typing import Optional, Set

from registration.config.logger import get_logger
from registration.shared.clients import KafkaClient
from registration.shared.errors import PublishError
from registration.shared.metrics.metrics_collector import MetricsCollector
from registration.shared.metrics.metrics_schema import PublisherMetrics


class WelcomePublisher:
    """
    Fire-and-forget publisher for welcome notifications.

    Each message is sent from its own asyncio task. Failures are logged and
    counted, never raised to the caller, and never retried.
    """

    def __init__(
        self,
        kafka_client: KafkaClient,
        topic: str = "welcome_queue",
        logger=None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.kafka_client = kafka_client
        self.topic = topic
        self.logger = logger or get_logger("WelcomePublisher")
        self.metrics = metrics or MetricsCollector(self.logger)
        self._pending: Set[asyncio.Task] = set()

    def send_welcome_message(self, text: str) -> None:
        """Schedule ``text`` for delivery and return immediately."""
        task = asyncio.create_task(self._deliver(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        self.metrics.increment(PublisherMetrics.DISPATCHED)

    async def _send(self, text: str):
        try:
            await self.kafka_client.produce(self.topic, text.encode("utf-8"))
        except Exception as e:
            raise PublishError(f"Failed to enqueue message on {self.topic}") from e

    async def _deliver(self, text: str):
        try:
            await self._send(text)
            self.metrics.increment(PublisherMetrics.PUBLISHED)
        except PublishError as e:
            # store write is already committed; the user simply gets no welcome event
            self.metrics.increment(PublisherMetrics.FAILED)
            self.logger.error(
                "Welcome message dropped",
                extra={"topic": self.topic, "error": str(e), "cause": repr(e.__cause__)},
            )

    async def drain(self):
        """Wait for every in-flight send to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
