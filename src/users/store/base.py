from abc import ABC, abstractmethod
from datetime import datetime

from src.users.schemas import User


class UserStore(ABC):
    @abstractmethod
    def user_exists(self, email: str) -> bool:
        pass

    @abstractmethod
    def create_user(
        self, id: str, email: str, password_hash: str, timestamp: datetime
    ) -> User:
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> User:
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> User:
        pass
