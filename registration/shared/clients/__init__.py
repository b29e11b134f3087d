from registration.shared.clients.kafka_client import ConnectionState, KafkaClient
from registration.shared.clients.redis_client import RedisClient

__all__ = ["ConnectionState", "KafkaClient", "RedisClient"]
