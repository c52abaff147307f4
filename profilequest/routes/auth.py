import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from profilequest.core.dependencies import get_current_user
from profilequest.core.jwt import create_access_token
from profilequest.core.limiter import limiter
from profilequest.core.security import hash_password, verify_password
from profilequest.db.crud.users import create_user, get_user_by_email
from profilequest.db.models.user import User
from profilequest.db.session import get_db
from profilequest.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token({"sub": str(user.id)})
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


# =====================================================
# SIGNUP
# =====================================================
@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def signup(request: Request, body: UserCreate, db: Session = Depends(get_db)):
    if get_user_by_email(db, body.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    name = body.name.strip() or body.email.split("@")[0]
    user = create_user(
        db,
        name=name,
        email=body.email,
        hashed_password=hash_password(body.password),
    )
    logger.info(f"New account created: user {user.id}")
    return _auth_response(user)


# =====================================================
# LOGIN
# =====================================================
@router.post("/login", response_model=AuthResponse)
@limiter.limit("5/minute")
def login(request: Request, body: UserLogin, db: Session = Depends(get_db)):
    user = get_user_by_email(db, body.email)

    if not user or not verify_password(body.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {body.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    return _auth_response(user)


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"user": UserResponse.model_validate(current_user)}
