from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.common.exceptions import AuthenticationException
from src.common.redis import RedisClient, get_redis_client
from src.config import Settings, get_settings
from src.users.schemas import User
from src.users.service import UserService
from src.users.sessions import SessionService
from src.users.store.base import UserStore
from src.users.store.dependencies import get_user_store


bearer_scheme = HTTPBearer(auto_error=False)


def get_session_service(
    redis_client: RedisClient = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
) -> SessionService:
    return SessionService(
        redis_client=redis_client,
        key_prefix=settings.SESSION_NAMESPACE,
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )


def get_user_service(
    user_store: UserStore = Depends(get_user_store),
    session_service: SessionService = Depends(get_session_service),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(
        user_store=user_store,
        session_service=session_service,
        password_hash_iterations=settings.PASSWORD_HASH_ITERATIONS,
        password_min_length=settings.PASSWORD_MIN_LENGTH,
    )


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise AuthenticationException()
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    user_service: UserService = Depends(get_user_service),
) -> User:
    return user_service.authenticate(token)
