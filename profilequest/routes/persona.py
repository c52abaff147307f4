import json
import logging
import random

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from profilequest.ai.avatar import AvatarService, get_avatar_service
from profilequest.ai.generator import GenerationService, get_generation_service
from profilequest.ai.prompts import BADGE_AVATAR_PROMPT, PERSONA_AVATAR_PROMPT
from profilequest.core.dependencies import get_current_user
from profilequest.core.limiter import limiter
from profilequest.db.crud.personas import get_persona, upsert_persona
from profilequest.db.models.user import User
from profilequest.db.session import get_db
from profilequest.schemas.persona import (
    AvatarGenerateRequest,
    PersonaGenerateRequest,
    PersonaResponse,
    PersonaSaveRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["persona"])

AVATAR_STYLES = ["cartoon", "anime", "pixel", "vintage", "modern"]
BADGE_STYLE = "unicode emoji"


@router.get("/persona")
def read_persona(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    persona = get_persona(db, current_user.id)
    if persona is None:
        return {"persona": None}
    return {"persona": PersonaResponse.model_validate(persona, from_attributes=True)}


@router.post("/persona/save")
def save_persona(
    body: PersonaSaveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    upsert_persona(
        db,
        user_id=current_user.id,
        persona_type=body.persona.persona_type,
        attributes=body.persona.attributes,
        avatar=body.avatar,
    )
    return {"ok": True}


@router.post("/persona/generate")
@limiter.limit("10/minute")
async def generate_persona(
    request: Request,
    body: PersonaGenerateRequest,
    current_user: User = Depends(get_current_user),
    generator: GenerationService = Depends(get_generation_service),
    avatars: AvatarService = Depends(get_avatar_service),
):
    """Infers a persona and starter quests from the user's inputs, plus an avatar."""
    persona, quests = await generator.generate_persona(
        current_role=body.currentRole,
        proficiency=body.proficiency,
        interests=body.interests,
        strengths=body.strengths,
        goals=body.goals,
    )

    prompt = PERSONA_AVATAR_PROMPT.format(
        style=random.choice(AVATAR_STYLES),
        persona_json=json.dumps(persona.model_dump()),
        current_role=body.currentRole,
        proficiency=body.proficiency,
        interests=body.interests,
        strengths=body.strengths,
        goals=body.goals,
    )
    seed = body.currentRole or body.strengths or body.goals or "seed"
    avatar, used = await avatars.generate(prompt, seed=seed, image_base64=body.imageBase64)
    logger.info(f"Persona generated for user {current_user.id} (avatar: {used})")

    return {
        "persona": persona.model_dump(),
        "quests": [q.model_dump() for q in quests],
        "avatar": avatar,
    }


@router.post("/avatar/generate")
@limiter.limit("10/minute")
async def generate_avatar(
    request: Request,
    body: AvatarGenerateRequest,
    current_user: User = Depends(get_current_user),
    avatars: AvatarService = Depends(get_avatar_service),
):
    meta = body.promptMeta
    prompt = BADGE_AVATAR_PROMPT.format(
        style=BADGE_STYLE,
        current_role=meta.currentRole,
        proficiency=meta.proficiency,
        interests=meta.interests,
        strengths=meta.strengths,
        goals=meta.goals,
    )
    seed = f"user-{current_user.id}"
    image, used = await avatars.generate(prompt, seed=seed, image_base64=body.imageBase64)
    return {"image": image, "used": used, "style": BADGE_STYLE}
