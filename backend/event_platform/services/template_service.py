"""Event templates: creation, listing, deletion and instantiation."""
import logging
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from event_platform.errors import StoreFailure, TemplateNameTaken, TemplateNotFound
from event_platform.models.event_template import EventTemplate
from event_platform.models.organization import organization_key
from event_platform.services import access_policy
from event_platform.services.access_policy import Operation

logger = logging.getLogger(__name__)


def create_template(
    db: Session,
    actor_id: str,
    name: str,
    template_data: dict[str, Any],
    description: Optional[str] = None,
    organization_id: Optional[str] = None,
    is_public: bool = False,
) -> EventTemplate:
    """Create a template owned by the caller, optionally scoped to an organization."""
    organization_id = str(organization_id) if organization_id else None
    key = organization_key(organization_id)
    template = EventTemplate(
        user_id=actor_id,
        organization_id=organization_id,
        organization_key=key,
        name=name,
        description=description,
        template_data=template_data,
        is_public=is_public,
        usage_count=0,
    )
    access_policy.require(db, actor_id, template, Operation.insert)

    duplicate = (
        db.query(EventTemplate.id)
        .filter(
            EventTemplate.user_id == actor_id,
            EventTemplate.organization_key == key,
            EventTemplate.name == name,
        )
        .first()
    )
    if duplicate:
        raise TemplateNameTaken(f"A template named '{name}' already exists in this scope")

    db.add(template)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.error("Template insert failed for user %s: %s", actor_id, exc.orig)
        raise StoreFailure("Failed to create template", details=str(exc.orig))
    db.refresh(template)
    logger.info("Created template '%s' (%s) for user %s", name, template.id, actor_id)
    return template


def list_templates(
    db: Session,
    actor_id: str,
    organization_id: Optional[str] = None,
    include_public: bool = True,
) -> list[EventTemplate]:
    """Templates the caller may read, most used first."""
    query = db.query(EventTemplate).filter(
        access_policy.visible_templates_clause(actor_id, include_public=include_public)
    )
    if organization_id:
        query = query.filter(EventTemplate.organization_id == str(organization_id))
    return query.order_by(EventTemplate.usage_count.desc(), EventTemplate.name).all()


def get_readable_template(db: Session, actor_id: str, template_id: str) -> EventTemplate:
    """Fetch a template the caller may read; absence and denial raise the same error."""
    template = db.query(EventTemplate).filter(EventTemplate.id == str(template_id)).first()
    if template is None or not access_policy.authorize(db, actor_id, template, Operation.select):
        logger.warning("Template %s not found or not readable by user %s", template_id, actor_id)
        raise TemplateNotFound("Template not found or access denied")
    return template


def instantiate_template(db: Session, actor_id: str, template_id: str) -> dict[str, Any]:
    """Return the template payload and count the use.

    The usage bump runs after the read has succeeded, in its own commit. It is
    a popularity counter, so a failed or raced increment never fails the call.
    """
    template = get_readable_template(db, actor_id, template_id)
    payload = dict(template.template_data or {})
    _bump_usage(db, template.id)
    logger.info("User %s instantiated template %s", actor_id, template.id)
    return payload


def _bump_usage(db: Session, template_id: str) -> None:
    try:
        db.execute(
            update(EventTemplate)
            .where(EventTemplate.id == template_id)
            .values(usage_count=EventTemplate.usage_count + 1)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not bump usage_count for template %s: %s", template_id, exc)


def delete_template(db: Session, actor_id: str, template_id: str) -> None:
    """Delete a template the caller manages."""
    template = db.query(EventTemplate).filter(EventTemplate.id == str(template_id)).first()
    if template is None or not access_policy.authorize(db, actor_id, template, Operation.delete):
        raise TemplateNotFound("Template not found or access denied")
    db.delete(template)
    db.commit()
    logger.info("Deleted template %s by user %s", template_id, actor_id)
