import logging
from uuid import uuid4

from src.common.current_datetime import get_current_datetime
from src.common.exceptions import (
    AuthenticationException,
    KnownException,
    ResourceNotFoundException,
)
from src.users.passwords import hash_password, verify_password
from src.users.schemas import AuthToken, Credentials, User
from src.users.sessions import SessionService
from src.users.store.base import UserStore

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        *,
        user_store: UserStore,
        session_service: SessionService,
        password_hash_iterations: int,
        password_min_length: int,
    ):
        self.user_store = user_store
        self.session_service = session_service
        self.password_hash_iterations = password_hash_iterations
        self.password_min_length = password_min_length

    def register(self, credentials: Credentials) -> AuthToken:
        if len(credentials.password) < self.password_min_length:
            raise KnownException(
                f"Password must be at least {self.password_min_length} characters long"
            )

        user = self.user_store.create_user(
            id=str(uuid4()),
            email=credentials.email,
            password_hash=hash_password(
                credentials.password, self.password_hash_iterations
            ),
            timestamp=get_current_datetime(),
        )
        logger.info("Registered user %s", user.id)

        return AuthToken(token=self.session_service.create_session(user.id))

    def login(self, credentials: Credentials) -> AuthToken:
        try:
            user = self.user_store.get_user_by_email(credentials.email)
        except ResourceNotFoundException:
            raise AuthenticationException("Invalid credentials")

        if not verify_password(credentials.password, user.password_hash):
            raise AuthenticationException("Invalid credentials")

        return AuthToken(token=self.session_service.create_session(user.id))

    def logout(self, token: str) -> None:
        self.session_service.delete_session(token)

    def authenticate(self, token: str) -> User:
        user_id = self.session_service.get_user_id(token)
        if not user_id:
            raise AuthenticationException("Invalid or expired token")

        try:
            return self.user_store.get_user(user_id)
        except ResourceNotFoundException:
            self.session_service.delete_session(token)
            raise AuthenticationException("Invalid or expired token")
