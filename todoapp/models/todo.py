import uuid
from datetime import datetime, UTC
from enum import StrEnum

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, ForeignKey, String, Text
from todoapp.database import Base


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(StrEnum):
    PERSONAL = "personal"
    WORK = "work"
    SHOPPING = "shopping"
    HEALTH = "health"
    OTHER = "other"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Todo(Base):
    __tablename__ = "todos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    priority = Column(
        Enum(Priority, name="todo_priority", values_callable=_enum_values),
        nullable=False,
        default=Priority.MEDIUM,
    )
    category = Column(
        Enum(Category, name="todo_category", values_callable=_enum_values),
        nullable=False,
        default=Category.PERSONAL,
    )
    due_date = Column(Date, nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
