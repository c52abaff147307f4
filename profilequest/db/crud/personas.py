from typing import Optional

from sqlalchemy.orm import Session

from profilequest.db.models.persona import Persona


def get_persona(db: Session, user_id: int) -> Persona | None:
    return db.query(Persona).filter(Persona.user_id == user_id).first()


def upsert_persona(
    db: Session,
    user_id: int,
    persona_type: str,
    attributes: dict,
    avatar: Optional[str] = None,
) -> Persona:
    persona = get_persona(db, user_id)
    if persona is None:
        persona = Persona(user_id=user_id)
        db.add(persona)

    persona.persona_type = persona_type
    persona.attributes = dict(attributes)
    # Keep the previous avatar when none is sent.
    if avatar is not None:
        persona.avatar = avatar or None

    db.commit()
    db.refresh(persona)
    return persona
