import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from profilequest.ai.generator import GenerationService, get_generation_service
from profilequest.core.dependencies import Clock, get_clock, get_current_user
from profilequest.core.limiter import limiter
from profilequest.db.crud.personas import get_persona
from profilequest.db.crud.quests import delete_quest, get_quest_by_title, list_quests, upsert_quests
from profilequest.db.models.user import User
from profilequest.db.session import get_db
from profilequest.schemas.quest import QuestGenerateRequest, QuestSaveRequest, QuestTitleRequest
from profilequest.services.progression import complete_quest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quests", tags=["quests"])

DEFAULT_PERSONA_TYPE = "Software Developer"
# Sent by the client before a persona exists.
PLACEHOLDER_PERSONA_TYPES = {"", "Human Being"}


@router.get("")
def read_quests(
    status_filter: str = Query(default="available", alias="status", pattern="^(available|completed|all)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quests = list_quests(db, current_user.id, status_filter)
    return {"quests": [q.to_dict() for q in quests]}


@router.post("/generate")
@limiter.limit("10/minute")
async def generate_quests(
    request: Request,
    body: QuestGenerateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    generator: GenerationService = Depends(get_generation_service),
):
    """
    Generates five new quests for the user's persona and level, skipping
    anything that duplicates a quest they already have.
    """
    persona_type = (body.personaType or "").strip()
    if persona_type in PLACEHOLDER_PERSONA_TYPES:
        persona = get_persona(db, current_user.id)
        persona_type = persona.persona_type if persona else DEFAULT_PERSONA_TYPE

    if body.existing:
        existing = [q.model_dump() for q in body.existing]
    elif body.existingTitles:
        existing = [{"title": t} for t in body.existingTitles]
    else:
        existing = [
            {"title": q.title, "description": q.description, "category": q.category}
            for q in list_quests(db, current_user.id, "all")
        ]

    level = body.level or current_user.level or 1
    quests = await generator.generate_quests(persona_type, level, existing)
    return {"quests": [q.model_dump() for q in quests]}


@router.post("/save")
def save_quests(
    body: QuestSaveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    saved = upsert_quests(db, current_user.id, body.quests)
    return {"ok": True, "saved": len(saved)}


@router.post("/delete")
def remove_quest(
    body: QuestTitleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not delete_quest(db, current_user.id, body.title):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quest not found")
    return {"ok": True}


@router.post("/complete")
def finish_quest(
    body: QuestTitleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    quest = get_quest_by_title(db, current_user.id, body.title)
    if quest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quest not found")

    result = complete_quest(db, current_user, quest, clock())
    return {
        "ok": True,
        "quest": result.quest.to_dict(),
        "awarded": result.awarded,
        "levelsGained": result.levels_gained,
        "profile": {
            "level": result.state.level,
            "xp": result.state.xp,
            "nextLevelXp": result.state.next_level_xp,
            "totalXp": result.total_xp,
        },
    }
