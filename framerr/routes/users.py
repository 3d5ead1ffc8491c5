"""Current-user routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from framerr.auth import get_current_user
from framerr.core.logging import get_logger
from framerr.extensions import get_db
from framerr.models import LinkedAccount, User, UserConfig
from framerr.schemas.users import PreferencesResponse, PreferencesUpdate

logger = get_logger("routes.users")
router = APIRouter(prefix="/api/users/me", tags=["Users"])


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the caller's preferences document."""
    return {"preferences": UserConfig.get_preferences(db, user.id)}


@router.put("/preferences", response_model=PreferencesResponse)
def update_preferences(
    payload: PreferencesUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update the caller's preferences.

    The body is deep-merged into what is stored, so a client only needs to
    send the keys it changes. Lists are replaced, not merged.
    """
    preferences = UserConfig.merge_preferences(db, user.id, payload.preferences)
    logger.info(
        "Updated preferences for %s: %s",
        user.username,
        ", ".join(sorted(payload.preferences)) or "(none)",
    )
    return {"preferences": preferences}


@router.get("/linked-accounts")
def get_linked_accounts(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    accounts = (
        db.query(LinkedAccount)
        .filter_by(user_id=user.id)
        .order_by(LinkedAccount.service)
        .all()
    )
    return {"accounts": [account.to_dict() for account in accounts]}
