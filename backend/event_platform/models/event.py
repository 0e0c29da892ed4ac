"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from event_platform.database import Base


class EventStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    cancelled = "cancelled"
    completed = "completed"


class Visibility(str, enum.Enum):
    public = "public"
    private = "private"
    unlisted = "unlisted"


class OwnerContextType(str, enum.Enum):
    individual = "individual"
    organization = "organization"


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    slug = Column(String(255), nullable=False, unique=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=True)
    venue = Column(String(200), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    cover_image_url = Column(Text, nullable=True)
    max_attendees = Column(Integer, nullable=True)
    category = Column(String(50), nullable=True)
    visibility = Column(SAEnum(Visibility, native_enum=False, length=20), nullable=False, default=Visibility.public)
    status = Column(SAEnum(EventStatus, native_enum=False, length=20), nullable=False, default=EventStatus.draft)
    # individual -> a users.user_id, organization -> an orgs.id
    owner_context_type = Column(SAEnum(OwnerContextType, native_enum=False, length=20), nullable=False, default=OwnerContextType.individual)
    owner_context_id = Column(String(36), nullable=False)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    template_id = Column(String(36), ForeignKey("event_templates.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    ticket_tiers = relationship("TicketTier", back_populates="event", cascade="all, delete-orphan")
