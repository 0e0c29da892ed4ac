"""Shared route dependencies."""
from fastapi import Depends
from sqlalchemy.orm import Session

from event_platform.auth import get_current_user_id
from event_platform.database import get_db
from event_platform.services.user_service import ensure_user


def get_actor_id(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> str:
    """Authenticated caller id with a local profile row guaranteed to exist."""
    ensure_user(db, user_id)
    return user_id
