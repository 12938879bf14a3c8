import secrets

from src.common.redis import RedisClient


class SessionService:
    """Opaque bearer tokens mapped to user ids, expiring in Redis."""

    def __init__(self, redis_client: RedisClient, key_prefix: str, ttl_seconds: int):
        self.redis_client = redis_client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    def _get_session_key(self, token: str) -> str:
        return f"{self.key_prefix}:{token}"

    def create_session(self, user_id: str) -> str:
        token = secrets.token_urlsafe(32)
        self.redis_client.set(
            self._get_session_key(token), user_id, ex=self.ttl_seconds
        )
        return token

    def get_user_id(self, token: str) -> str | None:
        return self.redis_client.get(self._get_session_key(token))

    def delete_session(self, token: str) -> None:
        self.redis_client.delete(self._get_session_key(token))
