import asyncio
import json
from enum import Enum
from typing import Any, List, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.admin import AIOKafkaAdminClient, NewTopic

from registration.config.logger import get_logger
from registration.shared.logger import JohnWickLogger
from registration.shared.metrics.metrics_collector import MetricsCollector
from registration.shared.metrics.metrics_schema import KafkaMetrics
from registration.shared.retry import ExponentialBackoffRetry, RetryPolicy


class ConnectionState(str, Enum):
    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class KafkaClient:
    """
    Async Kafka producer wrapper.

    The producer is started once and shared by every request. Reconnection
    after transient broker failures is handled inside aiokafka.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        logger: Optional[JohnWickLogger] = None,
        metrics: Optional[MetricsCollector] = None,
        retry_policy: Optional[RetryPolicy] = None,
        acks: Any = "all",
    ):
        self.bootstrap_servers = bootstrap_servers
        self.logger = logger or get_logger("KafkaClient")
        self.metrics = metrics or MetricsCollector(self.logger)
        # only used for start()
        self.retry_policy: RetryPolicy = retry_policy or ExponentialBackoffRetry(max_retries=3, logger=self.logger)
        self.acks = acks

        self._producer: Optional[AIOKafkaProducer] = None
        self.state = ConnectionState.UNCONNECTED
        self._start_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    # --- Lifecycle ---
    async def start(self):
        """Start the producer."""
        # Prevents trying to start the connection more than once at the same time.
        async with self._start_lock:
            if self.state is ConnectionState.CONNECTED:
                return

            async def _start_producer():
                producer = AIOKafkaProducer(bootstrap_servers=self.bootstrap_servers, acks=self.acks)
                try:
                    await producer.start()
                except Exception:
                    await producer.stop()
                    raise
                self._producer = producer
                self.logger.info("Kafka Producer started", extra={"bootstrap_servers": self.bootstrap_servers})

            self.state = ConnectionState.CONNECTING
            try:
                await self.retry_policy.execute(_start_producer)
                self.state = ConnectionState.CONNECTED
            except Exception as e:
                self.state = ConnectionState.UNCONNECTED
                self.logger.error("Failed to start KafkaClient", extra={"error": str(e)})
                raise

    async def stop(self):
        """Stop the producer, flushing pending sends."""
        if self._producer is not None:
            await self._producer.stop()
            self._producer = None
            self.logger.info("Kafka Producer stopped")
        self.state = ConnectionState.CLOSED

    # --- Produce ---
    async def produce(self, topic: str, value: Any, key: Optional[str] = None):
        """
        Send one message and wait for the broker acknowledgement.

        ``bytes`` are sent as-is, ``str`` as UTF-8, anything else as JSON.
        """
        if self._producer is None or self.state is not ConnectionState.CONNECTED:
            raise ConnectionError(f"Kafka producer is {self.state.value}")

        if isinstance(value, bytes):
            payload = value
        elif isinstance(value, str):
            payload = value.encode("utf-8")
        else:
            payload = json.dumps(value).encode("utf-8")

        try:
            await self._producer.send_and_wait(topic, payload, key=key.encode() if key else None)
            self.metrics.increment(KafkaMetrics.PRODUCED)
            self.logger.debug("Message produced", extra={"topic": topic, "bytes": len(payload)})
        except Exception as e:
            self.logger.error("Failed to produce message", extra={"topic": topic, "error": str(e)})
            self.metrics.increment(KafkaMetrics.FAILED_PRODUCE)
            raise

    # The broker-side equivalent of a durable queue declaration. In prod,
    # create the topic on the broker with the right replication factor.
    async def create_topics(self, topics: List[str], num_partitions: int = 1, replication_factor: int = 1):
        """Create Kafka topics if they don't already exist."""
        admin = AIOKafkaAdminClient(bootstrap_servers=self.bootstrap_servers)
        await admin.start()
        try:
            existing = await admin.list_topics()
            new_topics = [
                NewTopic(name=t, num_partitions=num_partitions, replication_factor=replication_factor)
                for t in topics if t not in existing
            ]

            if not new_topics:
                self.logger.info("All topics already exist", extra={"topics": topics})
                return

            await admin.create_topics(new_topics)
            self.logger.info("Topics created successfully", extra={"topics": [t.name for t in new_topics]})
        except Exception as e:
            self.logger.error("Failed to create topics", extra={"error": str(e), "topics": topics})
            raise
        finally:
            await admin.close()
