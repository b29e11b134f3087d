import asyncio
import json
from typing import Any, Optional
from redis.asyncio import Redis

from registration.config.logger import get_logger
from registration.shared.logger import JohnWickLogger
from registration.shared.metrics.metrics_collector import MetricsCollector
from registration.shared.metrics.metrics_schema import RedisMetrics
from registration.shared.retry import ExponentialBackoffRetry, RetryPolicy


class RedisClient:
    """Async Redis cache client with JSON values and a default TTL."""

    def __init__(
        self,
        redis_url: str,
        default_ttl: Optional[int] = 600,
        socket_timeout: Optional[float] = 5.0,
        logger: Optional[JohnWickLogger] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.redis_url = redis_url
        self.default_ttl = default_ttl
        self.socket_timeout = socket_timeout
        self.logger = logger or get_logger("RedisClient")
        self.redis: Optional[Redis] = None
        self.metrics = MetricsCollector(self.logger)
        # only used for the initial connection
        self.retry_policy: RetryPolicy = retry_policy or ExponentialBackoffRetry(max_retries=3, logger=self.logger)

    async def connect(self):
        """Connect to Redis and ping to verify connectivity."""
        async def _connect():
            self.redis = Redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_timeout=self.socket_timeout,
            )
            await self.redis.ping()
            self.logger.info("Connected to Redis", extra={"redis_url": self.redis_url})

        try:
            await self.retry_policy.execute(_connect)
        except asyncio.CancelledError:
            self.logger.warning("Redis connect cancelled")
            raise
        except Exception as e:
            self.logger.error("Failed to connect to Redis after retries", extra={"redis_url": self.redis_url})
            raise ConnectionError(f"Cannot connect to Redis at {self.redis_url}") from e

    async def ping(self) -> bool:
        if self.redis is None:
            self.logger.warning("Redis PING skipped, client is not connected", extra={"redis_url": self.redis_url})
            self.metrics.increment(RedisMetrics.FAILED_PING)
            return False

        try:
            result = await self.redis.ping()
            self.metrics.increment(RedisMetrics.PING)
            return bool(result)
        except Exception as e:
            self.logger.error("Redis PING failed", extra={"redis_url": self.redis_url, "error": str(e)})
            self.metrics.increment(RedisMetrics.FAILED_PING)
            return False

    async def set(self, key: str, value: Any, ttl: Optional[int] = None):
        """SET ``key`` with ``ttl`` seconds expiry, falling back to the default TTL."""
        if self.redis is None:
            self.metrics.increment(RedisMetrics.FAILED_SET)
            raise ConnectionError(f"Redis at {self.redis_url} is not connected")

        payload = json.dumps(value) if isinstance(value, (dict, list)) else value
        expiry = ttl if ttl is not None else self.default_ttl

        try:
            await self.redis.set(key, payload, ex=expiry)
            self.logger.debug("Redis SET", extra={"key": key, "ttl": expiry})
            self.metrics.increment(RedisMetrics.SET)
        except Exception:
            self.logger.error("Redis SET failed", extra={"key": key})
            self.metrics.increment(RedisMetrics.FAILED_SET)
            self.metrics.report()
            raise

    async def close(self):
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis connection closed")
