"""Row-level authorization for events, templates and drafts.

Every read or write of those tables goes through this module. The predicates
are pure functions of (actor, row, operation) plus a ``manages`` callback that
answers "is the actor admin/owner of this organization?". The callback is
only invoked after the cheaper ownership checks fail, and the database-backed
version is a single EXISTS probe, so membership is never joined in full.

Predicate shapes:
- events: creator, or admin/owner of the owning organization; public events
  are readable by anyone
- templates: owning user, or admin/owner of the template's organization;
  public templates are readable by anyone
- drafts: same as templates without the public read
"""
import enum
import logging
from typing import Any, Callable, Optional

from sqlalchemy import and_, exists, or_
from sqlalchemy.orm import Session

from event_platform.errors import AccessDenied, AppError
from event_platform.models.event import Event, OwnerContextType, Visibility
from event_platform.models.event_draft import EventDraft
from event_platform.models.event_template import EventTemplate
from event_platform.models.organization import MANAGER_ROLES, OrgMember

logger = logging.getLogger(__name__)

Manages = Callable[[str], bool]


class Operation(str, enum.Enum):
    select = "select"
    insert = "insert"
    update = "update"
    delete = "delete"


def _is_owner(actor_id: Optional[str], owner_id: Optional[str]) -> bool:
    return bool(actor_id) and actor_id == owner_id


def scoped_row_allowed(
    actor_id: Optional[str],
    user_id: Optional[str],
    organization_id: Optional[str],
    manages: Manages,
) -> bool:
    """Owning user, or admin/owner of the row's organization when it has one."""
    if _is_owner(actor_id, user_id):
        return True
    return bool(actor_id) and bool(organization_id) and manages(organization_id)


def event_allowed(actor_id: Optional[str], event: Any, operation: Operation, manages: Manages) -> bool:
    if operation == Operation.select and event.visibility == Visibility.public:
        return True
    if _is_owner(actor_id, event.created_by):
        return True
    return (
        bool(actor_id)
        and event.owner_context_type == OwnerContextType.organization
        and bool(event.owner_context_id)
        and manages(event.owner_context_id)
    )


def template_allowed(actor_id: Optional[str], template: Any, operation: Operation, manages: Manages) -> bool:
    if operation == Operation.select and template.is_public:
        return True
    return scoped_row_allowed(actor_id, template.user_id, template.organization_id, manages)


def draft_allowed(actor_id: Optional[str], draft: Any, operation: Operation, manages: Manages) -> bool:
    # No public carve-out: drafts stay private to their scope.
    return scoped_row_allowed(actor_id, draft.user_id, draft.organization_id, manages)


_PREDICATES = {
    Event: event_allowed,
    EventTemplate: template_allowed,
    EventDraft: draft_allowed,
}


def manages_organization(db: Session, user_id: str, org_id: str) -> bool:
    """True when user_id holds admin or owner in org_id."""
    return db.query(
        exists().where(
            OrgMember.org_id == org_id,
            OrgMember.user_id == user_id,
            OrgMember.role.in_(MANAGER_ROLES),
        )
    ).scalar()


def authorize(db: Session, actor_id: Optional[str], row: Any, operation: Operation) -> bool:
    """Evaluate the predicate registered for the row's model."""
    predicate = _PREDICATES.get(type(row))
    if predicate is None:
        raise TypeError(f"No access policy for {type(row).__name__}")
    return predicate(actor_id, row, operation, lambda org_id: manages_organization(db, actor_id, org_id))


def require(
    db: Session,
    actor_id: Optional[str],
    row: Any,
    operation: Operation,
    denial: type[AppError] = AccessDenied,
) -> None:
    """Raise ``denial`` unless the actor may perform operation on row."""
    if not authorize(db, actor_id, row, operation):
        logger.warning(
            "Denied %s on %s %s for user %s",
            operation.value, type(row).__tablename__, getattr(row, "id", None), actor_id,
        )
        raise denial(f"Not allowed to {operation.value} this {type(row).__name__}")


def _manager_of(org_column, actor_id: str):
    return exists().where(
        OrgMember.org_id == org_column,
        OrgMember.user_id == actor_id,
        OrgMember.role.in_(MANAGER_ROLES),
    )


def visible_templates_clause(actor_id: str, include_public: bool = True):
    """Template read predicate as a SQL filter for list queries."""
    clauses = [
        EventTemplate.user_id == actor_id,
        and_(EventTemplate.organization_id.isnot(None), _manager_of(EventTemplate.organization_id, actor_id)),
    ]
    if include_public:
        clauses.append(EventTemplate.is_public.is_(True))
    return or_(*clauses)
