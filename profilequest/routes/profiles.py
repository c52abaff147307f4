from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from profilequest.core.dependencies import get_current_user
from profilequest.db.crud.users import find_users, get_user_by_email
from profilequest.db.models.user import User
from profilequest.db.session import get_db
from profilequest.schemas.user import ProfileUpdate, UserResponse

router = APIRouter(prefix="/api/profiles", tags=["profiles"])

PROFILE_LOOKUP_LIMIT = 20


@router.get("/by")
def lookup_profiles(
    email: Optional[str] = None,
    name: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Finds up to 20 profiles by exact email and/or name."""
    if not email and not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide email or name")

    users = find_users(db, email=email, name=name, limit=PROFILE_LOOKUP_LIMIT)
    return {"data": [UserResponse.model_validate(u) for u in users]}


@router.post("/upsert")
def update_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if body.email and body.email.lower() != current_user.email:
        if get_user_by_email(db, body.email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
        current_user.email = body.email.lower()
    if body.name:
        current_user.name = body.name.strip()

    db.commit()
    db.refresh(current_user)
    return {"ok": True, "user": UserResponse.model_validate(current_user)}
