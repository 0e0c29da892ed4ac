"""Event draft autosave routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from event_platform.database import get_db
from event_platform.routers.deps import get_actor_id
from event_platform.schemas.draft import DraftOut, DraftSave, DraftSaved
from event_platform.services import draft_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.put("/", response_model=DraftSaved)
def save_draft(payload: DraftSave, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Save (insert or replace) the caller's draft for a scope."""
    draft_id = draft_service.save_draft(
        db=db,
        actor_id=actor_id,
        draft_data=payload.draft_data,
        organization_id=payload.organization_id,
    )
    return DraftSaved(draft_id=draft_id)


@router.get("/", response_model=DraftOut)
def load_draft(
    organization_id: Optional[str] = Query(None),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """Load the caller's draft for a scope; empty when nothing was saved."""
    return DraftOut(draft_data=draft_service.load_draft(db=db, actor_id=actor_id, organization_id=organization_id))
