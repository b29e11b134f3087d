from fastapi import Request

from registration.config.init_core_services import CoreServices
from registration.users.services import UserService

# ----------------------------
# Dependency Injection Functions
# ----------------------------
# Components are built once in the startup handler and stored on app.state.


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_core_services(request: Request) -> CoreServices:
    return request.app.state.core
