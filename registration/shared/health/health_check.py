import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from registration.shared.clients import KafkaClient, RedisClient
from registration.config.logger import get_logger
from registration.shared.logger import JohnWickLogger

SERVICES = ("redis", "postgres", "kafka")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HealthChecker:
    """Single-attempt dependency checks for the cache, store and queue."""

    def __init__(
        self,
        redis_client: RedisClient,
        kafka_client: KafkaClient,
        engine: AsyncEngine,
        logger: Optional[JohnWickLogger] = None,
    ):
        self.redis_client = redis_client
        self.kafka_client = kafka_client
        self.engine = engine
        self.logger = logger or get_logger("HealthChecker")

    async def check_redis(self) -> Dict[str, Any]:
        try:
            up = await self.redis_client.ping()
        except Exception as e:
            self.logger.warning("Redis check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "error": str(e), "checked_at": _now()}
        if up:
            return {"status": "healthy", "checked_at": _now()}
        self.logger.warning("Redis check failed")
        return {"status": "unhealthy", "error": "Redis did not respond to PING", "checked_at": _now()}

    async def check_postgres(self) -> Dict[str, Any]:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "healthy", "checked_at": _now()}
        except Exception as e:
            self.logger.warning("Postgres check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "error": str(e), "checked_at": _now()}

    async def check_kafka(self) -> Dict[str, Any]:
        state = self.kafka_client.state.value
        if self.kafka_client.is_connected:
            return {"status": "healthy", "state": state, "checked_at": _now()}
        self.logger.warning("Kafka check failed", extra={"state": state})
        return {"status": "unhealthy", "state": state, "error": f"producer is {state}", "checked_at": _now()}

    async def run_all(self, services: Optional[List[str]] = None) -> Dict[str, Any]:
        """Run all health checks or a subset of services."""
        services = [s for s in (services or SERVICES) if s in SERVICES]
        checks = await asyncio.gather(*(getattr(self, f"check_{name}")() for name in services))
        results: Dict[str, Any] = dict(zip(services, checks))

        total = len(services)
        healthy = sum(1 for r in checks if r["status"] == "healthy")
        results["summary"] = {"total": total, "healthy": healthy, "unhealthy": total - healthy}
        return results
