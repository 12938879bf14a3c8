from fastapi import Depends

from src.common.redis import get_redis_client, RedisClient
from src.config import Settings, get_settings
from src.users.store.base import UserStore
from src.users.store.backend import get_user_store_backend


def get_user_store(
    redis_client: RedisClient = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
) -> UserStore:
    return get_user_store_backend(redis_client, settings)
