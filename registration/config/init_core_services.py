from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import sessionmaker

from registration.config.db_session import get_sessionmaker, init_db
from registration.config.factory import get_db_engine, get_kafka_client, get_redis_client
from registration.config.logger import get_logger
from registration.config.settings import Settings
from registration.shared.clients import KafkaClient, RedisClient
from registration.shared.retry import ExponentialBackoffRetry

logger = get_logger("CoreServices")


@dataclass
class CoreServices:
    settings: Settings
    engine: AsyncEngine
    session_factory: sessionmaker
    redis_client: RedisClient
    kafka_client: KafkaClient


# ----------------------------
# Helper: wait for Postgres
# ----------------------------
async def wait_postgres(engine: AsyncEngine, retries: int = 3, delay: float = 0.5):
    async def _check():
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    await ExponentialBackoffRetry(max_retries=retries, base_delay=delay, logger=logger).execute(_check)
    logger.info("Postgres ready")


# ----------------------------
# Core initialization
# ----------------------------
async def init_core_services(settings: Settings) -> CoreServices:
    """
    Open the cache, queue and store connections once for the whole process
    and synchronize the schema when enabled.
    """
    redis_client = get_redis_client(settings)
    kafka_client = get_kafka_client(settings)
    engine = get_db_engine(settings)

    await redis_client.connect()
    logger.info("Redis ready")

    await kafka_client.start()
    if settings.kafka.create_topics:
        await kafka_client.create_topics(
            [settings.kafka.welcome_topic],
            num_partitions=settings.kafka.num_partitions,
            replication_factor=settings.kafka.replication_factor,
        )
    logger.info("Kafka ready", extra={"topic": settings.kafka.welcome_topic})

    await wait_postgres(engine, retries=settings.postgres.max_retries, delay=settings.postgres.retry_backoff)
    await init_db(engine, synchronize=settings.postgres.synchronize)

    return CoreServices(
        settings=settings,
        engine=engine,
        session_factory=get_sessionmaker(engine),
        redis_client=redis_client,
        kafka_client=kafka_client,
    )


async def shutdown_core_services(core: CoreServices):
    await core.kafka_client.stop()
    await core.redis_client.close()
    await core.engine.dispose()
    logger.info("Core services stopped")
