from fastapi import APIRouter, Depends, status

from src.common.exceptions import (
    ResourceType,
    bad_request_response,
    resource_already_exists_response,
    unauthorized_response,
)
from src.users.dependencies import get_bearer_token, get_user_service
from src.users.schemas import AuthToken, Credentials
from src.users.service import UserService


router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    responses={
        **bad_request_response("Password must be at least 6 characters long"),
        **resource_already_exists_response(ResourceType.USER),
    },
)
def register(
    credentials: Credentials,
    user_service: UserService = Depends(get_user_service),
) -> AuthToken:
    return user_service.register(credentials)


@router.post("/login", responses={**unauthorized_response})
def login(
    credentials: Credentials,
    user_service: UserService = Depends(get_user_service),
) -> AuthToken:
    return user_service.login(credentials)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**unauthorized_response},
)
def logout(
    token: str = Depends(get_bearer_token),
    user_service: UserService = Depends(get_user_service),
):
    user_service.logout(token)
