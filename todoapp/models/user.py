import uuid
from datetime import datetime, UTC

from sqlalchemy import Column, DateTime, String
from todoapp.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))


class RevokedToken(Base):
    """Access tokens invalidated by sign-out, keyed by their jti claim."""

    __tablename__ = "revoked_tokens"

    jti = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
