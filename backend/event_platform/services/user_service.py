"""Local user profiles mirrored from the auth provider."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from event_platform.models.user import User

logger = logging.getLogger(__name__)


def ensure_user(db: Session, user_id: str, display_name: Optional[str] = None) -> User:
    """Return the profile row for user_id, creating it on first sight."""
    user = db.query(User).filter(User.user_id == user_id).first()
    if user is not None:
        if display_name is not None and user.display_name != display_name:
            user.display_name = display_name
            db.commit()
            db.refresh(user)
        return user

    user = User(user_id=user_id, display_name=display_name or "")
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another request created it first.
        db.rollback()
        return db.query(User).filter(User.user_id == user_id).one()
    db.refresh(user)
    logger.info("Created profile for user %s", user_id)
    return user
