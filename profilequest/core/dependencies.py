from datetime import datetime
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from profilequest.core.clock import utcnow
from profilequest.core.jwt import decode_token
from profilequest.db.crud.users import get_user
from profilequest.db.models.user import User
from profilequest.db.session import get_db

bearer_scheme = HTTPBearer(auto_error=False)

Clock = Callable[[], datetime]


def get_clock() -> Clock:
    """Overridden in tests to pin "now"."""
    return utcnow


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolves the bearer token to a User.
    Any missing, expired or tampered token, or a deleted account, is a 401.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise unauthorized

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise unauthorized

    user = get_user(db, user_id)
    if user is None:
        raise unauthorized
    return user
