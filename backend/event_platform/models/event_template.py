"""EventTemplate ORM model: reusable event blueprint scoped to a user and optional organization."""
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from event_platform.database import Base


class EventTemplate(Base):
    __tablename__ = "event_templates"
    __table_args__ = (
        UniqueConstraint("user_id", "organization_key", "name", name="uq_template_name_per_scope"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    organization_id = Column(String(36), ForeignKey("orgs.id", ondelete="CASCADE"), nullable=True)
    organization_key = Column(String(36), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    template_data = Column(JSON, nullable=False, default=dict)
    is_public = Column(Boolean, nullable=False, default=False)
    usage_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
