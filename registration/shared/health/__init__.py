from registration.shared.health.health_check import HealthChecker
from registration.shared.health.router import health_router

__all__ = ["HealthChecker", "health_router"]
