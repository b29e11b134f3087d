import uvicorn
from fastapi import FastAPI

from registration.config.init_core_services import init_core_services, shutdown_core_services
from registration.config.logger import get_logger
from registration.config.settings import Settings, get_settings
from registration.messaging.welcome_publisher import WelcomePublisher
from registration.shared.errors import register_exception_handlers
from registration.shared.health import health_router
from registration.users.crud import UserRepository
from registration.users.routes import router as users_router
from registration.users.services import UserService

logger = get_logger("Application")


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app.app_name)
    register_exception_handlers(app)
    app.include_router(users_router)
    app.include_router(health_router)

    @app.on_event("startup")
    async def startup_event():
        """
        - Opens one store, cache and queue connection for the process.
        - Wires repository, publisher and service; handlers read them from app.state.
        """
        core = await init_core_services(settings)
        publisher = WelcomePublisher(core.kafka_client, topic=settings.kafka.welcome_topic)
        app.state.core = core
        app.state.publisher = publisher
        app.state.user_service = UserService(
            repository=UserRepository(core.session_factory),
            publisher=publisher,
            cache=core.redis_client,
        )
        logger.info("Application startup complete", extra={"env_mode": settings.app.env_mode})

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.publisher.drain()
        await shutdown_core_services(app.state.core)

    return app


app = create_app()


def run():
    settings = get_settings()
    uvicorn.run(
        "registration.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    run()
