from typing import Any, List, Optional

from registration.config.logger import get_logger
from registration.messaging.welcome_publisher import WelcomePublisher
from registration.shared.clients import RedisClient
from registration.shared.errors import PersistenceError, ValidationError
from registration.shared.metrics.metrics_collector import MetricsCollector
from registration.shared.metrics.metrics_schema import UserMetrics
from registration.users.crud import UserRepository
from registration.users.models import User
from registration.users.schemas import validate_user_payload


def welcome_text(name: str) -> str:
    return f"Welcome, {name}!"


class UserService:
    def __init__(
        self,
        repository: UserRepository,
        publisher: WelcomePublisher,
        cache: Optional[RedisClient] = None,
        logger=None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.repository = repository
        self.publisher = publisher
        self.cache = cache
        self.logger = logger or get_logger("UserService")
        self.metrics = metrics or MetricsCollector(self.logger)

    async def register_user(self, payload: Any) -> User:
        """
        Validate, persist, cache and announce a new user.

        Raises ValidationError before touching the store, PersistenceError if
        the write fails. Cache and queue failures do not fail the request.
        """
        result = validate_user_payload(payload)
        if not result.ok:
            raise ValidationError(result.errors)

        try:
            user = await self.repository.create(result.value)
        except PersistenceError:
            self.metrics.increment(UserMetrics.FAILED_PERSIST)
            raise
        self.metrics.increment(UserMetrics.CREATED)

        await self._cache_user(user)
        self.publisher.send_welcome_message(welcome_text(user.name))
        self.logger.info("User registered", extra={"user_id": user.user_id})
        return user

    async def list_users(self) -> List[User]:
        try:
            users = await self.repository.find_all()
        except PersistenceError:
            self.metrics.increment(UserMetrics.FAILED_PERSIST)
            raise
        self.metrics.increment(UserMetrics.LISTED)
        return users

    async def _cache_user(self, user: User):
        if self.cache is None:
            return
        try:
            await self.cache.set(f"user:{user.user_id}", user.to_dict())
        except Exception as e:
            self.metrics.increment(UserMetrics.CACHE_FAILED)
            self.logger.warning("Failed to cache user", extra={"user_id": user.user_id, "error": str(e)})
