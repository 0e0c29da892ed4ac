"""Event draft autosave: one draft per (user, organization-or-none).

The scope key is normalized through ``organization_key`` before it is stored
or queried, so the personal scope collides with itself under the unique
constraint instead of slipping through as NULL != NULL.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from event_platform.errors import StoreFailure
from event_platform.models.event_draft import EventDraft
from event_platform.models.organization import organization_key
from event_platform.services import access_policy
from event_platform.services.access_policy import Operation

logger = logging.getLogger(__name__)


def dialect_insert(db: Session):
    """Return the ``insert`` construct that supports ON CONFLICT for the bound dialect."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise RuntimeError(f"Upsert is not supported on dialect {dialect!r}")
    return insert


def save_draft(
    db: Session,
    actor_id: str,
    draft_data: dict[str, Any],
    organization_id: Optional[str] = None,
) -> str:
    """Insert or replace the caller's draft for the scope and return its id."""
    organization_id = str(organization_id) if organization_id else None
    key = organization_key(organization_id)
    candidate = EventDraft(
        user_id=actor_id,
        organization_id=organization_id,
        organization_key=key,
        draft_data=draft_data,
    )
    access_policy.require(db, actor_id, candidate, Operation.insert)

    now = datetime.now(timezone.utc)
    insert = dialect_insert(db)
    stmt = insert(EventDraft).values(
        id=str(uuid.uuid4()),
        user_id=actor_id,
        organization_id=organization_id,
        organization_key=key,
        draft_data=draft_data,
        last_saved=now,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "organization_key"],
        set_={
            "draft_data": stmt.excluded.draft_data,
            "last_saved": stmt.excluded.last_saved,
            "updated_at": stmt.excluded.updated_at,
        },
    ).returning(EventDraft.id)

    try:
        draft_id = db.execute(stmt).scalar_one()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.error("Draft save failed for user %s scope %s: %s", actor_id, key, exc.orig)
        raise StoreFailure("Failed to save draft", details=str(exc.orig))

    logger.info("Saved draft %s for user %s (scope %s)", draft_id, actor_id, key)
    return draft_id


def load_draft(db: Session, actor_id: str, organization_id: Optional[str] = None) -> dict[str, Any]:
    """Return the caller's own draft payload for the scope, or ``{}`` when none exists."""
    draft = (
        db.query(EventDraft)
        .filter(
            EventDraft.user_id == actor_id,
            EventDraft.organization_key == organization_key(organization_id),
        )
        .first()
    )
    if draft is None:
        return {}
    access_policy.require(db, actor_id, draft, Operation.select)
    return dict(draft.draft_data or {})
