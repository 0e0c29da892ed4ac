"""User profile routes."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from event_platform.auth import get_current_user_id
from event_platform.database import get_db
from event_platform.schemas.user import UserOut, UserProfileIn
from event_platform.services.user_service import ensure_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/me", response_model=UserOut)
def upsert_profile(
    payload: UserProfileIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create or update the caller's profile."""
    return ensure_user(db, user_id, display_name=payload.display_name)


@router.get("/me", response_model=UserOut)
def get_profile(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Fetch the caller's profile, creating an empty one on first access."""
    return ensure_user(db, user_id)
