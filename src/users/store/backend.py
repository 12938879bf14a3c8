from src.config import Settings
from src.common.postgres import get_engine
from src.common.redis import RedisClient
from src.users.store.base import UserStore
from src.users.store.postgres.store import PostgresUserStore
from src.users.store.redis.store import RedisUserStore


def get_user_store_backend(
    redis_client: RedisClient,
    settings: Settings,
) -> UserStore:
    if settings.USER_STORE_BACKEND == "postgres":
        return PostgresUserStore(engine=get_engine(settings.POSTGRES_URL))
    elif settings.USER_STORE_BACKEND == "redis":
        return RedisUserStore(
            redis_client=redis_client,
            key_prefix=settings.USER_STORE_NAMESPACE,
        )
    else:
        raise ValueError(
            f"Unsupported user store backend: {settings.USER_STORE_BACKEND}"
        )
