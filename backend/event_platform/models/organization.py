"""Organization and OrgMember ORM models."""
import uuid
import enum
from typing import Optional
from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from event_platform.database import Base

# Stored in place of NULL wherever "no organization" takes part in a
# uniqueness key, so that key and lookup predicate agree.
NO_ORGANIZATION_KEY = "00000000-0000-0000-0000-000000000000"


def organization_key(organization_id: Optional[str]) -> str:
    """Normalize an optional organization id into its scope key."""
    return str(organization_id) if organization_id else NO_ORGANIZATION_KEY


class OrgRole(str, enum.Enum):
    member = "member"
    admin = "admin"
    owner = "owner"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK = {OrgRole.member: 0, OrgRole.admin: 1, OrgRole.owner: 2}

MANAGER_ROLES = (OrgRole.admin, OrgRole.owner)


class Organization(Base):
    __tablename__ = "orgs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    slug = Column(String(50), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("OrgMember", back_populates="organization", cascade="all, delete-orphan")


class OrgMember(Base):
    __tablename__ = "org_members"
    __table_args__ = (
        CheckConstraint("role IN ('member', 'admin', 'owner')", name="ck_org_members_role"),
    )

    org_id = Column(String(36), ForeignKey("orgs.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    role = Column(SAEnum(OrgRole, native_enum=False, length=20), nullable=False, default=OrgRole.member)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    organization = relationship("Organization", back_populates="members")
