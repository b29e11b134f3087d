import pytest
from unittest.mock import AsyncMock, MagicMock

import registration.main as main
from registration.config.init_core_services import CoreServices
from registration.config.settings import Settings
from registration.messaging.welcome_publisher import WelcomePublisher
from registration.users.services import UserService


@pytest.mark.asyncio
async def test_startup_wires_components_and_shutdown_releases_them(monkeypatch, engine, session_factory):
    settings = Settings()
    core = CoreServices(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        redis_client=MagicMock(),
        kafka_client=MagicMock(),
    )
    init = AsyncMock(return_value=core)
    shutdown = AsyncMock()
    monkeypatch.setattr(main, "init_core_services", init)
    monkeypatch.setattr(main, "shutdown_core_services", shutdown)

    app = main.create_app(settings)
    async with app.router.lifespan_context(app):
        init.assert_awaited_once_with(settings)
        assert app.state.core is core
        assert isinstance(app.state.user_service, UserService)
        assert isinstance(app.state.publisher, WelcomePublisher)
        assert app.state.publisher.topic == settings.kafka.welcome_topic
        assert app.state.user_service.cache is core.redis_client

    shutdown.assert_awaited_once_with(core)
