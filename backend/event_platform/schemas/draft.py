"""Pydantic schemas for event drafts."""
from typing import Any, Optional
from pydantic import BaseModel


class DraftSave(BaseModel):
    draft_data: dict[str, Any]
    organization_id: Optional[str] = None


class DraftSaved(BaseModel):
    draft_id: str


class DraftOut(BaseModel):
    draft_data: dict[str, Any]
