"""Pydantic schemas for user profiles."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserProfileIn(BaseModel):
    display_name: str = ""


class UserOut(BaseModel):
    user_id: str
    display_name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
