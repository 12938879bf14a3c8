from datetime import datetime
from sqlalchemy import String, DateTime
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from src.config import get_settings


settings = get_settings()

Base = declarative_base()


class UserModel(Base):
    __tablename__ = settings.USER_STORE_NAMESPACE

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __init__(
        self,
        id: str,
        email: str,
        password_hash: str,
        created_at: datetime,
    ):
        self.id = id
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at
