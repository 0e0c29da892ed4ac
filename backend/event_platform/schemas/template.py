"""Pydantic schemas for event templates."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    template_data: dict[str, Any] = {}
    organization_id: Optional[str] = None
    is_public: bool = False


class TemplateOut(BaseModel):
    id: str
    user_id: str
    organization_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    template_data: dict[str, Any]
    is_public: bool
    usage_count: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TemplateInstance(BaseModel):
    template_id: str
    template_data: dict[str, Any]
