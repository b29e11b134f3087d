from sqlalchemy.ext.asyncio import AsyncEngine

from registration.config.db_session import get_engine
from registration.config.logger import get_logger
from registration.config.settings import Settings
from registration.shared.clients import KafkaClient, RedisClient
from registration.shared.retry import ExponentialBackoffRetry


# ----------------------------
# Redis client factory
# ----------------------------
def get_redis_client(settings: Settings) -> RedisClient:
    logger = get_logger("RedisClient")
    retry_policy = ExponentialBackoffRetry(
        max_retries=settings.redis.max_retries,
        base_delay=settings.redis.retry_backoff,
        logger=logger,
    )
    return RedisClient(
        redis_url=settings.redis.get_url(settings.app.env_mode),
        default_ttl=settings.redis.default_ttl,
        socket_timeout=settings.redis.socket_timeout,
        logger=logger,
        retry_policy=retry_policy,
    )


# ----------------------------
# Kafka client factory
# ----------------------------
def get_kafka_client(settings: Settings) -> KafkaClient:
    logger = get_logger("KafkaClient")
    retry_policy = ExponentialBackoffRetry(
        max_retries=settings.kafka.max_retries,
        base_delay=settings.kafka.retry_backoff,
        logger=logger,
    )
    return KafkaClient(
        bootstrap_servers=settings.kafka.get_bootstrap_servers(settings.app.env_mode),
        logger=logger,
        retry_policy=retry_policy,
    )


# ----------------------------
# Postgres engine factory
# ----------------------------
def get_db_engine(settings: Settings) -> AsyncEngine:
    return get_engine(settings.postgres.get_database_url(settings.app.env_mode), settings.postgres)
