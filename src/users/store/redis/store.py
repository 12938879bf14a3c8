from datetime import datetime
from redis.client import Pipeline

from src.common.redis import RedisClient
from src.common.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ResourceType,
)
from src.users.store.base import UserStore
from src.users.schemas import User


class RedisUserStore(UserStore):
    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _get_user_key(self, email: str) -> str:
        return f"{self.key_prefix}:email:{email}"

    def _get_id_key(self, user_id: str) -> str:
        return f"{self.key_prefix}:id:{user_id}"

    def user_exists(self, email: str) -> bool:
        return self.client.exists(self._get_user_key(email)) == 1

    def create_user(
        self, id: str, email: str, password_hash: str, timestamp: datetime
    ) -> User:
        user_key = self._get_user_key(email)

        def write_user(pipeline: Pipeline) -> None:
            if pipeline.exists(user_key):
                raise ResourceAlreadyExistsException(ResourceType.USER, email)

            pipeline.multi()
            pipeline.hset(
                user_key,
                mapping={
                    "id": id,
                    "email": email,
                    "password_hash": password_hash,
                    "created_at": timestamp.isoformat(),
                },
            )
            pipeline.set(self._get_id_key(id), email)

        # Retried on WatchError, so a racing registration ends up as a duplicate
        self.client.transaction(write_user, user_key)

        return self.get_user_by_email(email)

    def get_user_by_email(self, email: str) -> User:
        data = self.client.hgetall(self._get_user_key(email))

        # A hash without credentials is not a usable account
        if not data or "password_hash" not in data:
            raise ResourceNotFoundException(ResourceType.USER, email)

        return User(
            id=data["id"],
            email=data["email"],
            password_hash=data["password_hash"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def get_user(self, user_id: str) -> User:
        email = self.client.get(self._get_id_key(user_id))

        if not email:
            raise ResourceNotFoundException(ResourceType.USER, user_id)

        return self.get_user_by_email(email)
