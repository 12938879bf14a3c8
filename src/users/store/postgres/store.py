from datetime import datetime
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import IntegrityError

from src.common.current_datetime import ensure_utc
from src.common.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ResourceType,
)
from src.users.schemas import User
from src.users.store.base import UserStore
from src.users.store.postgres.model import Base, UserModel


class PostgresUserStore(UserStore):
    def __init__(self, engine: Engine):
        self.engine = engine
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_user(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            created_at=ensure_utc(model.created_at),
        )

    def user_exists(self, email: str) -> bool:
        with self.Session() as session:
            return session.query(
                session.query(UserModel).filter_by(email=email).exists()
            ).scalar()

    def create_user(
        self, id: str, email: str, password_hash: str, timestamp: datetime
    ) -> User:
        with self.Session() as session:
            if self.user_exists(email):
                raise ResourceAlreadyExistsException(ResourceType.USER, email)

            new_user = UserModel(
                id=id,
                email=email,
                password_hash=password_hash,
                created_at=timestamp,
            )

            try:
                session.add(new_user)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ResourceAlreadyExistsException(ResourceType.USER, email) from e

            return self._to_user(new_user)

    def get_user_by_email(self, email: str) -> User:
        with self.Session() as session:
            user = session.query(UserModel).filter_by(email=email).first()

            if not user:
                raise ResourceNotFoundException(ResourceType.USER, email)

            return self._to_user(user)

    def get_user(self, user_id: str) -> User:
        with self.Session() as session:
            user = session.get(UserModel, user_id)

            if not user:
                raise ResourceNotFoundException(ResourceType.USER, user_id)

            return self._to_user(user)
