import asyncio
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from registration.config.logger import get_logger
from registration.shared.errors import PersistenceError
from registration.users.models import User
from registration.users.schemas import UserCreate

# listings only include users strictly older than this
ADULT_AGE = 18


class UserRepository:
    """Data access for User rows. Performs no validation."""

    def __init__(self, session_factory: sessionmaker, logger=None):
        self.session_factory = session_factory
        self.logger = logger or get_logger("UserRepository")

    async def create(self, data: UserCreate) -> User:
        """Insert one row and return it with its generated userId."""
        user = User(name=data.name, email=data.email, age=data.age)
        try:
            async with self.session_factory() as session:
                session.add(user)
                await session.commit()
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Failed to create user", extra={"error": str(e)})
            raise PersistenceError("Could not save user") from e

        self.logger.info("User created", extra={"user_id": user.user_id})
        return user

    async def find_all(self, min_age: Optional[int] = ADULT_AGE) -> List[User]:
        """
        Return users with ``age > min_age`` ordered by name, then userId.
        ``min_age=None`` returns every row in the same order.
        """
        stmt = select(User).order_by(User.name.asc(), User.user_id.asc())
        if min_age is not None:
            stmt = stmt.where(User.age > min_age)

        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Failed to list users", extra={"error": str(e)})
            raise PersistenceError("Could not read users") from e
