"""Event API routes: delegates to event_service for every gate and policy check."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from event_platform.database import get_db
from event_platform.routers.deps import get_actor_id
from event_platform.schemas.event import EventCreate, EventCreateResponse, EventOut, EventUpdate
from event_platform.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventCreateResponse, status_code=status.HTTP_200_OK)
def create_event(
    payload: EventCreate,
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """Create an event and its ticket tiers. Tier failures do not undo the event."""
    result = event_service.create_event(db=db, actor_id=actor_id, payload=payload)
    return EventCreateResponse(
        success=True,
        event=EventOut.model_validate(result.event),
        ticket_tiers=result.ticket_tiers,
        tier_errors=result.tier_errors,
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Fetch an event the caller can see."""
    return event_service.get_event(db=db, actor_id=actor_id, event_id=event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """Partial update (creator or organization admin/owner only)."""
    return event_service.update_event(db=db, actor_id=actor_id, event_id=event_id, updates=payload.changes())
