"""EventDraft ORM model: at most one per (user, organization-or-none)."""
import uuid
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from event_platform.database import Base


class EventDraft(Base):
    __tablename__ = "event_drafts"
    __table_args__ = (
        UniqueConstraint("user_id", "organization_key", name="uq_draft_per_user_scope"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    organization_id = Column(String(36), ForeignKey("orgs.id", ondelete="CASCADE"), nullable=True)
    # organization_id, or NO_ORGANIZATION_KEY when the draft is personal
    organization_key = Column(String(36), nullable=False)
    draft_data = Column(JSON, nullable=False, default=dict)
    last_saved = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
