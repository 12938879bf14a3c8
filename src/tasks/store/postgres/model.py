from datetime import datetime
from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from src.config import get_settings


settings = get_settings()

Base = declarative_base()


class TaskModel(Base):
    __tablename__ = settings.TASK_STORE_NAMESPACE

    id: Mapped[str] = mapped_column(String, primary_key=True)
    owner_id: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        CheckConstraint("end_time >= start_time", name="task_time_range"),
        CheckConstraint("priority BETWEEN 1 AND 5", name="task_priority_range"),
        CheckConstraint("status IN ('pending', 'finished')", name="task_status"),
        Index("task_owner_status_idx", "owner_id", "status"),
        Index("task_owner_created_idx", "owner_id", "created_at"),
    )

    def __init__(
        self,
        id: str,
        owner_id: str,
        title: str,
        start_time: datetime,
        end_time: datetime,
        priority: int,
        status: str,
        created_at: datetime,
        updated_at: datetime,
    ):
        self.id = id
        self.owner_id = owner_id
        self.title = title
        self.start_time = start_time
        self.end_time = end_time
        self.priority = priority
        self.status = status
        self.created_at = created_at
        self.updated_at = updated_at
