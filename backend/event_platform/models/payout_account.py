"""PayoutAccount ORM model. Written by the payments integration, only read here."""
import uuid
from sqlalchemy import Column, String, DateTime, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from event_platform.database import Base
from event_platform.models.event import OwnerContextType

# Statuses that allow an owner context to sell paid tickets.
PAYOUT_READY_STATUSES = frozenset({"verified", "pro"})


class PayoutAccount(Base):
    __tablename__ = "payout_accounts"
    __table_args__ = (UniqueConstraint("context_type", "context_id", name="uq_payout_account_context"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    context_type = Column(SAEnum(OwnerContextType, native_enum=False, length=20), nullable=False)
    context_id = Column(String(36), nullable=False)
    verification_status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
