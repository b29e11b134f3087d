from fastapi import APIRouter, Depends

from registration.config.dependencies import get_core_services
from registration.config.init_core_services import CoreServices
from registration.shared.health.health_check import HealthChecker

health_router = APIRouter(prefix="/health", tags=["health"])


def get_health_checker(core: CoreServices = Depends(get_core_services)) -> HealthChecker:
    return HealthChecker(
        redis_client=core.redis_client,
        kafka_client=core.kafka_client,
        engine=core.engine,
    )


@health_router.get("/", summary="Check all services")
async def check_all_services(checker: HealthChecker = Depends(get_health_checker)):
    return await checker.run_all()


@health_router.get("/redis", summary="Check Redis")
async def check_redis(checker: HealthChecker = Depends(get_health_checker)):
    return {"redis": await checker.check_redis()}


@health_router.get("/postgres", summary="Check Postgres")
async def check_postgres(checker: HealthChecker = Depends(get_health_checker)):
    return {"postgres": await checker.check_postgres()}


@health_router.get("/kafka", summary="Check Kafka")
async def check_kafka(checker: HealthChecker = Depends(get_health_checker)):
    return {"kafka": await checker.check_kafka()}
