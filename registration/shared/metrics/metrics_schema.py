class UserMetrics:
    """Metric keys for the user registration flow"""
    CREATED = "users_created"
    LISTED = "users_listed"
    FAILED_PERSIST = "users_failed_persist"
    CACHE_FAILED = "users_cache_failed"


class KafkaMetrics:
    """Standard metric keys for KafkaClient"""
    PRODUCED = "produced"
    FAILED_PRODUCE = "failed_produce"


class PublisherMetrics:
    """Metric keys for WelcomePublisher"""
    DISPATCHED = "welcome_dispatched"
    PUBLISHED = "welcome_published"
    FAILED = "welcome_failed"


class RedisMetrics:
    """Standard metric keys for RedisClient"""
    SET = "redis_set"
    PING = "redis_ping"
    FAILED_SET = "redis_failed_set"
    FAILED_PING = "redis_failed_ping"
