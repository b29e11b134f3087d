from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from registration.config.settings import PostgresSettings
from registration.config.logger import get_logger

logger = get_logger("DB_Session_Init")

# ----------------------------
# Base declarative class
# ----------------------------
Base = declarative_base()


# ----------------------------
# Engine factory
# ----------------------------
def get_engine(database_url: str, postgres: PostgresSettings = None) -> AsyncEngine:
    """
    Create the SQLAlchemy async engine with pooling options taken from
    ``postgres`` settings.
    """
    postgres = postgres or PostgresSettings()
    engine = create_async_engine(
        str(database_url),
        echo=postgres.echo,
        pool_size=postgres.pool_size,
        max_overflow=postgres.max_overflow,
        pool_timeout=postgres.pool_timeout,
        pool_recycle=postgres.pool_recycle,
    )
    logger.info("Async engine created", extra={"url": engine.url.render_as_string(hide_password=True)})
    return engine


# ----------------------------
# Async session factory
# ----------------------------
def get_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    """Return an AsyncSession factory bound to ``engine``."""
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


# ----------------------------
# Database initialization
# ----------------------------
async def init_db(engine: AsyncEngine, synchronize: bool = True):
    """
    Create missing tables and indexes for every registered model when
    ``synchronize`` is set. Existing tables are never altered.
    """
    # register models with Base
    import registration.users.models  # noqa: F401

    if not synchronize:
        logger.info("Schema synchronization disabled, skipping create_all")
        return

    try:
        async with engine.begin() as conn:
            logger.info("Creating database tables...")
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created or already exist")
    except Exception as e:
        logger.exception("Failed to initialize database", extra={"error": str(e)})
        raise


async def drop_db(engine: AsyncEngine):
    """Drop all tables (useful for tests or reset scripts)."""
    logger.warning("Dropping all database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("All tables dropped successfully")
