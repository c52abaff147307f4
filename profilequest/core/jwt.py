from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from profilequest.core.config import settings

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_minutes: int = None, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_minutes:
        expire = now + timedelta(minutes=expires_minutes)
    elif expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "iat": now
    })

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=ALGORITHM
    )


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM]
        )
    except JWTError:
        return None
