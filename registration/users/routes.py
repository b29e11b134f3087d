from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from registration.config.dependencies import get_user_service
from registration.users.schemas import UserRead
from registration.users.services import UserService

router = APIRouter(tags=["users"])


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(payload: Any = Body(None), service: UserService = Depends(get_user_service)):
    user = await service.register_user(payload)
    return UserRead.model_validate(user)


@router.get("/users", response_model=List[UserRead])
async def list_users_endpoint(service: UserService = Depends(get_user_service)):
    users = await service.list_users()
    return [UserRead.model_validate(u) for u in users]
