"""Pydantic schemas for Events and their ticket tiers."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel

from event_platform.models.event import EventStatus, OwnerContextType, Visibility


class TicketTierIn(BaseModel):
    # Validated per tier after the event is stored, never at request parsing.
    name: Optional[str] = None
    description: Optional[str] = None
    price_cents: Optional[int] = 0
    currency: Optional[str] = None
    max_quantity: Optional[int] = None
    available_quantity: Optional[int] = None
    access_level: Optional[str] = None


class EventCreate(BaseModel):
    # title and start_at are checked by the service so a missing value maps to invalid-input.
    title: Optional[str] = None
    description: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    cover_image_url: Optional[str] = None
    max_attendees: Optional[int] = None
    category: Optional[str] = None
    visibility: str = "public"
    owner_context_type: str = "individual"
    owner_context_id: Optional[str] = None
    template_id: Optional[str] = None
    # Raw on purpose: malformed tiers become tier_errors instead of a 400.
    ticket_tiers: Any = None


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    cover_image_url: Optional[str] = None
    max_attendees: Optional[int] = None
    category: Optional[str] = None
    visibility: Optional[str] = None
    status: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class TicketTierOut(BaseModel):
    id: str
    event_id: str
    name: str
    description: str
    price_cents: int
    currency: str
    max_quantity: Optional[int] = None
    available_quantity: Optional[int] = None
    access_level: str
    is_active: bool

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    id: str
    slug: str
    title: str
    description: Optional[str] = None
    start_at: datetime
    end_at: Optional[datetime] = None
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    cover_image_url: Optional[str] = None
    max_attendees: Optional[int] = None
    category: Optional[str] = None
    visibility: Visibility
    status: EventStatus
    owner_context_type: OwnerContextType
    owner_context_id: str
    created_by: str
    template_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventCreateResponse(BaseModel):
    success: bool = True
    event: EventOut
    ticket_tiers: list[TicketTierOut] = []
    tier_errors: list[str] = []
