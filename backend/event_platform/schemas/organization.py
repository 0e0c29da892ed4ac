"""Pydantic schemas for Organizations."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from event_platform.models.organization import OrgRole


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=50, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class OrganizationOut(BaseModel):
    id: str
    name: str
    slug: str
    created_at: Optional[datetime] = None
    members: list[OrgMemberOut] = []

    model_config = {"from_attributes": True}


class OrgMemberAdd(BaseModel):
    user_id: str
    role: OrgRole = OrgRole.member


class OrgMemberOut(BaseModel):
    org_id: str
    user_id: str
    role: OrgRole
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# Rebuild OrganizationOut now that OrgMemberOut is defined
OrganizationOut.model_rebuild()
