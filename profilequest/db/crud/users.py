from typing import List, Optional

from sqlalchemy.orm import Session

from profilequest.db.models.user import User


def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


def find_users(db: Session, email: Optional[str] = None, name: Optional[str] = None, limit: int = 20) -> List[User]:
    query = db.query(User)
    if email:
        query = query.filter(User.email == email.lower())
    if name:
        query = query.filter(User.name == name)
    return query.order_by(User.id).limit(limit).all()


def create_user(
    db: Session,
    name: str,
    email: str,
    hashed_password: str,
    **kwargs
) -> User:
    user = User(
        name=name,
        email=email.lower(),
        hashed_password=hashed_password,
        **kwargs
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    return user
