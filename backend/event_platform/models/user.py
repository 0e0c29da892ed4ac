"""User ORM model: local mirror of the identity provider's user."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from event_platform.database import Base


class User(Base):
    __tablename__ = "users"

    # Same value as the auth provider's subject claim.
    user_id = Column(String(36), primary_key=True)
    display_name = Column(String(100), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
