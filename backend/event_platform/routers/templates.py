"""Event template routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from event_platform.database import get_db
from event_platform.routers.deps import get_actor_id
from event_platform.schemas.template import TemplateCreate, TemplateInstance, TemplateOut
from event_platform.services import template_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=TemplateOut, status_code=status.HTTP_201_CREATED)
def create_template(payload: TemplateCreate, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Create a template owned by the caller."""
    return template_service.create_template(
        db=db,
        actor_id=actor_id,
        name=payload.name,
        template_data=payload.template_data,
        description=payload.description,
        organization_id=payload.organization_id,
        is_public=payload.is_public,
    )


@router.get("/", response_model=list[TemplateOut])
def list_templates(
    organization_id: Optional[str] = Query(None),
    include_public: bool = Query(True),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """List templates visible to the caller."""
    return template_service.list_templates(
        db=db, actor_id=actor_id, organization_id=organization_id, include_public=include_public,
    )


@router.post("/{template_id}/instantiate", response_model=TemplateInstance)
def instantiate_template(template_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Return a template's payload for prefilling the event form."""
    data = template_service.instantiate_template(db=db, actor_id=actor_id, template_id=template_id)
    return TemplateInstance(template_id=template_id, template_data=data)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Delete a template the caller manages."""
    template_service.delete_template(db=db, actor_id=actor_id, template_id=template_id)
