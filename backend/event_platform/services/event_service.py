"""Event creation workflow and the event read/update paths.

create_event runs a fixed sequence of gates, each failing fast before any
write:
- required fields (title, start_at)
- owner context resolution (individual, or an organization the caller runs)
- owner existence
- payout gate: paid tiers need a verified payout account for the owner context
- optional template must be readable by the caller
- events insert policy

The event is then committed on its own. Ticket tiers are a second, separately
committed step: if they fail, the event stays and the failure is reported in
``EventCreationResult.tier_errors``. Tiers arrive unvalidated so that a
malformed tier also lands there instead of rejecting the whole request.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy import case, exists
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from event_platform.errors import (
    EventNotFound,
    InvalidInput,
    InvalidOwner,
    NoOrganization,
    PayoutRequired,
    PayoutUnverified,
    StoreFailure,
)
from event_platform.models.event import Event, EventStatus, OwnerContextType, Visibility
from event_platform.models.organization import MANAGER_ROLES, Organization, OrgMember
from event_platform.models.payout_account import PAYOUT_READY_STATUSES, PayoutAccount
from event_platform.models.ticket_tier import TicketTier
from event_platform.schemas.event import EventCreate, TicketTierIn
from event_platform.services import access_policy, template_service
from event_platform.services.access_policy import Operation
from event_platform.services.slug import generate_slug

logger = logging.getLogger(__name__)

SLUG_ATTEMPTS = 3

UPDATABLE_FIELDS = frozenset({
    "title", "description", "start_at", "end_at", "venue", "address", "city",
    "state", "country", "cover_image_url", "max_attendees", "category",
    "visibility", "status",
})


@dataclass
class EventCreationResult:
    event: Event
    ticket_tiers: list[TicketTier] = field(default_factory=list)
    tier_errors: list[str] = field(default_factory=list)


def _parse_enum(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidInput(f"Invalid {field_name}: {value!r}", details={"allowed": allowed})


def primary_managed_organization(db: Session, user_id: str) -> Optional[str]:
    """Organization the user runs with the highest role; oldest membership breaks ties."""
    membership = (
        db.query(OrgMember)
        .filter(OrgMember.user_id == user_id, OrgMember.role.in_(MANAGER_ROLES))
        .order_by(
            case(*((OrgMember.role == role, role.rank) for role in MANAGER_ROLES), else_=0).desc(),
            OrgMember.created_at,
            OrgMember.org_id,
        )
        .first()
    )
    return membership.org_id if membership else None


def resolve_owner_context(
    db: Session,
    actor_id: str,
    owner_context_type: OwnerContextType,
    owner_context_id: Optional[str],
) -> tuple[OwnerContextType, str]:
    """Work out who owns a new event.

    Individual events always belong to the caller. Organization events use the
    given organization, or the caller's primary managed organization when none
    is given; either way the organization must exist.
    """
    if owner_context_type == OwnerContextType.individual:
        return OwnerContextType.individual, actor_id

    if not owner_context_id:
        owner_context_id = primary_managed_organization(db, actor_id)
        if owner_context_id is None:
            raise NoOrganization("No organization found for user")

    owner_context_id = str(owner_context_id)
    if not db.query(exists().where(Organization.id == owner_context_id)).scalar():
        raise InvalidOwner("Organization not found", details={"owner_context_id": owner_context_id})
    return OwnerContextType.organization, owner_context_id


def _raw_tiers(ticket_tiers: Any) -> list[Any]:
    if ticket_tiers is None:
        return []
    if isinstance(ticket_tiers, list):
        return ticket_tiers
    return [ticket_tiers]


def is_paid_tier(tier: Any) -> bool:
    """True when the tier carries a numeric price above zero; anything else counts as free."""
    price = tier.get("price_cents") if isinstance(tier, dict) else None
    if isinstance(price, bool) or price is None:
        return False
    try:
        return float(price) > 0
    except (TypeError, ValueError):
        return False


def check_payout_gate(
    db: Session,
    owner_context_type: OwnerContextType,
    owner_context_id: str,
    tiers: list[Any],
) -> None:
    """Paid tiers require a verified payout account for the exact owner context."""
    if not any(is_paid_tier(tier) for tier in tiers):
        return

    account = (
        db.query(PayoutAccount)
        .filter(
            PayoutAccount.context_type == owner_context_type,
            PayoutAccount.context_id == owner_context_id,
        )
        .first()
    )
    if account is None:
        raise PayoutRequired(
            "Payout account not found. Please set up your payout account before creating paid events."
        )
    if account.verification_status not in PAYOUT_READY_STATUSES:
        raise PayoutUnverified(
            "Payout account must be verified to create paid events. "
            f"Current status: {account.verification_status}",
            details={"verification_status": account.verification_status},
        )


def create_event(db: Session, actor_id: str, payload: EventCreate) -> EventCreationResult:
    """Run the creation gates, persist the event, then try the ticket tiers."""
    if not (payload.title and payload.title.strip()) or payload.start_at is None:
        raise InvalidInput("Title and start_at are required")

    requested_type = _parse_enum(OwnerContextType, payload.owner_context_type, "owner_context_type")
    visibility = _parse_enum(Visibility, payload.visibility, "visibility")
    raw_tiers = _raw_tiers(payload.ticket_tiers)

    owner_type, owner_id = resolve_owner_context(db, actor_id, requested_type, payload.owner_context_id)
    check_payout_gate(db, owner_type, owner_id, raw_tiers)

    template_id = None
    if payload.template_id:
        template_id = template_service.get_readable_template(db, actor_id, payload.template_id).id

    fields = dict(
        title=payload.title,
        description=payload.description,
        start_at=payload.start_at,
        end_at=payload.end_at,
        venue=payload.venue,
        address=payload.address,
        city=payload.city,
        state=payload.state,
        country=payload.country,
        cover_image_url=payload.cover_image_url,
        max_attendees=payload.max_attendees,
        category=payload.category,
        visibility=visibility,
        status=EventStatus.published,
        owner_context_type=owner_type,
        owner_context_id=owner_id,
        created_by=actor_id,
        template_id=template_id,
    )
    access_policy.require(db, actor_id, Event(**fields), Operation.insert)

    event = _insert_event(db, actor_id, fields)
    logger.info(
        "Created event '%s' (%s) slug=%s owner=%s:%s by %s",
        event.title, event.id, event.slug, owner_type.value, owner_id, actor_id,
    )

    tiers, tier_errors = _persist_ticket_tiers(db, event, raw_tiers)
    return EventCreationResult(event=event, ticket_tiers=tiers, tier_errors=tier_errors)


def _slug_taken(db: Session, slug: str) -> bool:
    return db.query(exists().where(Event.slug == slug)).scalar()


def _insert_event(db: Session, actor_id: str, fields: dict[str, Any]) -> Event:
    """Commit the event, drawing a new slug when another process already took it.

    The slug clock is only monotonic within one process, so workers can collide.
    """
    for attempt in range(1, SLUG_ATTEMPTS + 1):
        event = Event(slug=generate_slug(fields["title"]), **fields)
        db.add(event)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if attempt < SLUG_ATTEMPTS and _slug_taken(db, event.slug):
                logger.warning("Slug %s already taken, retrying (attempt %d)", event.slug, attempt)
                continue
            logger.error("Event creation failed for user %s: %s", actor_id, exc)
            raise StoreFailure("Failed to create event", details=str(exc.orig))
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Event creation failed for user %s: %s", actor_id, exc)
            raise StoreFailure("Failed to create event", details=str(getattr(exc, "orig", exc)))
        db.refresh(event)
        return event


def _validate_tiers(raw_tiers: list[Any]) -> tuple[list[TicketTierIn], list[str]]:
    tiers, errors = [], []
    for index, raw in enumerate(raw_tiers):
        try:
            tiers.append(TicketTierIn.model_validate(raw))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'tier'}: {err['msg']}"
                for err in exc.errors()
            )
            errors.append(f"ticket_tiers[{index}]: {problems}")
    return tiers, errors


def _persist_ticket_tiers(
    db: Session,
    event: Event,
    raw_tiers: list[Any],
) -> tuple[list[TicketTier], list[str]]:
    if not raw_tiers:
        return [], []

    tiers, errors = _validate_tiers(raw_tiers)
    if errors:
        logger.error("Rejected ticket tiers for event %s; event kept without tiers: %s", event.id, errors)
        return [], errors

    rows = [
        TicketTier(
            event_id=event.id,
            name=tier.name,
            description=tier.description or "",
            price_cents=tier.price_cents or 0,
            currency=tier.currency or "USD",
            max_quantity=tier.max_quantity,
            available_quantity=(
                tier.available_quantity if tier.available_quantity is not None else tier.max_quantity
            ),
            access_level=tier.access_level or "general",
            is_active=True,
        )
        for tier in tiers
    ]
    db.add_all(rows)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Ticket tier creation failed for event %s; event kept without tiers", event.id)
        return [], [str(getattr(exc, "orig", exc))]

    for row in rows:
        db.refresh(row)
    logger.info("Created %d ticket tier(s) for event %s", len(rows), event.id)
    return rows, []


def get_event(db: Session, actor_id: str, event_id: str) -> Event:
    """Fetch an event the caller may read."""
    event = db.query(Event).filter(Event.id == str(event_id)).first()
    if event is None or not access_policy.authorize(db, actor_id, event, Operation.select):
        raise EventNotFound("Event not found")
    return event


def update_event(db: Session, actor_id: str, event_id: str, updates: dict[str, Any]) -> Event:
    """Apply a partial update; only the creator or an organization admin/owner may write."""
    event = get_event(db, actor_id, event_id)
    access_policy.require(db, actor_id, event, Operation.update)

    for field_name, value in updates.items():
        if field_name not in UPDATABLE_FIELDS:
            continue
        if field_name == "visibility":
            value = _parse_enum(Visibility, value, "visibility")
        elif field_name == "status":
            value = _parse_enum(EventStatus, value, "status")
        elif field_name == "title" and not (value and value.strip()):
            raise InvalidInput("Title cannot be empty")
        elif field_name == "start_at" and value is None:
            raise InvalidInput("start_at cannot be cleared")
        setattr(event, field_name, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure("Failed to update event", details=str(getattr(exc, "orig", exc)))
    db.refresh(event)
    logger.info("Updated event %s by %s (%s)", event.id, actor_id, ", ".join(sorted(updates)))
    return event
