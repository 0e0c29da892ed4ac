"""Organization management API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from event_platform.database import get_db
from event_platform.errors import AccessDenied, Conflict, NotFound
from event_platform.models.organization import Organization, OrgMember, OrgRole
from event_platform.models.user import User
from event_platform.routers.deps import get_actor_id
from event_platform.schemas.organization import OrganizationCreate, OrganizationOut, OrgMemberAdd, OrgMemberOut
from event_platform.services.access_policy import manages_organization

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=OrganizationOut, status_code=status.HTTP_201_CREATED)
def create_organization(payload: OrganizationCreate, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Create an organization. The creator becomes its owner."""
    if db.query(Organization).filter(Organization.slug == payload.slug).first():
        raise Conflict(f"Organization slug '{payload.slug}' is taken")

    org = Organization(name=payload.name, slug=payload.slug)
    db.add(org)
    db.flush()

    db.add(OrgMember(org_id=org.id, user_id=actor_id, role=OrgRole.owner))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(f"Organization slug '{payload.slug}' is taken")
    db.refresh(org)
    logger.info("Created organization '%s' (%s) owned by %s", org.name, org.id, actor_id)
    return org


@router.get("/mine", response_model=list[OrgMemberOut])
def my_memberships(actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """List the caller's memberships."""
    return db.query(OrgMember).filter(OrgMember.user_id == actor_id).order_by(OrgMember.created_at).all()


@router.get("/{org_id}", response_model=OrganizationOut)
def get_organization(org_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Fetch an organization with members. Visible to its members only."""
    membership = (
        db.query(OrgMember)
        .filter(OrgMember.org_id == org_id, OrgMember.user_id == actor_id)
        .first()
    )
    if not membership:
        raise NotFound("Organization not found")
    return membership.organization


@router.post("/{org_id}/members", response_model=OrgMemberOut, status_code=status.HTTP_201_CREATED)
def add_member(org_id: str, payload: OrgMemberAdd, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    """Add a member. Admins and owners may add members; only owners may add owners."""
    org = db.query(Organization).filter(Organization.id == org_id).first()
    if not org:
        raise NotFound("Organization not found")

    if not manages_organization(db, actor_id, org_id):
        raise AccessDenied("You must be an organization admin or owner to add members")
    if payload.role == OrgRole.owner:
        caller = db.query(OrgMember).filter(OrgMember.org_id == org_id, OrgMember.user_id == actor_id).one()
        if caller.role != OrgRole.owner:
            raise AccessDenied("Only owners can add owners")

    user = db.query(User).filter(User.user_id == payload.user_id).first()
    if not user:
        raise NotFound("User not found")

    existing = (
        db.query(OrgMember)
        .filter(OrgMember.org_id == org_id, OrgMember.user_id == payload.user_id)
        .first()
    )
    if existing:
        raise Conflict("User is already a member of this organization")

    member = OrgMember(org_id=org_id, user_id=payload.user_id, role=payload.role)
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("Added user %s to organization %s as %s", payload.user_id, org_id, payload.role.value)
    return member
