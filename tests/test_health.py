from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock

from registration.config.dependencies import get_core_services
from registration.shared.clients import ConnectionState
from registration.shared.health import HealthChecker


def fake_clients(redis_up: bool = True, kafka_state: ConnectionState = ConnectionState.CONNECTED):
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(return_value=redis_up)
    kafka_client = MagicMock()
    kafka_client.state = kafka_state
    kafka_client.is_connected = kafka_state is ConnectionState.CONNECTED
    return redis_client, kafka_client


@pytest.mark.asyncio
async def test_all_services_healthy(engine):
    redis_client, kafka_client = fake_clients()
    checker = HealthChecker(redis_client=redis_client, kafka_client=kafka_client, engine=engine)

    results = await checker.run_all()

    assert {results[s]["status"] for s in ("redis", "postgres", "kafka")} == {"healthy"}
    assert results["summary"] == {"total": 3, "healthy": 3, "unhealthy": 0}


@pytest.mark.asyncio
async def test_unhealthy_services_are_reported(engine):
    redis_client, kafka_client = fake_clients(redis_up=False, kafka_state=ConnectionState.CLOSED)
    checker = HealthChecker(redis_client=redis_client, kafka_client=kafka_client, engine=engine)

    results = await checker.run_all()

    assert results["redis"]["status"] == "unhealthy"
    assert results["kafka"] == {
        "status": "unhealthy",
        "state": "closed",
        "error": "producer is closed",
        "checked_at": results["kafka"]["checked_at"],
    }
    assert results["summary"]["unhealthy"] == 2


@pytest.mark.asyncio
async def test_redis_error_is_reported_unhealthy(engine):
    redis_client, kafka_client = fake_clients()
    redis_client.ping.side_effect = ConnectionError("Redis is not connected")
    checker = HealthChecker(redis_client=redis_client, kafka_client=kafka_client, engine=engine)

    result = await checker.check_redis()

    assert result["status"] == "unhealthy"
    assert result["error"] == "Redis is not connected"


@pytest.mark.asyncio
async def test_run_subset(engine):
    redis_client, kafka_client = fake_clients()
    checker = HealthChecker(redis_client=redis_client, kafka_client=kafka_client, engine=engine)

    results = await checker.run_all(["postgres"])

    assert set(results) == {"postgres", "summary"}
    redis_client.ping.assert_not_awaited()


@pytest.mark.asyncio
async def test_health_endpoints(app, client, engine):
    redis_client, kafka_client = fake_clients()
    core = SimpleNamespace(redis_client=redis_client, kafka_client=kafka_client, engine=engine)
    app.dependency_overrides[get_core_services] = lambda: core

    overall = await client.get("/health/")
    kafka = await client.get("/health/kafka")

    assert overall.status_code == 200
    assert overall.json()["summary"]["healthy"] == 3
    assert kafka.json()["kafka"]["state"] == "connected"
