import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from profilequest.db.models.quest import QUEST_STATUS_COMPLETED, Quest
from profilequest.db.models.user import User
from profilequest.db.models.xp_event import XpEventRecord
from profilequest.services.leveling import LevelState, apply_xp, compute_level
from profilequest.services.xp_history import XpEvent, aggregate_events, build_buckets, parse_range

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    quest: Quest
    awarded: int
    levels_gained: int
    state: LevelState
    total_xp: int


def sync_level_state(user: User) -> LevelState:
    """Refreshes the cached level columns from the authoritative total."""
    state = compute_level(user.total_xp or 0)
    user.level = state.level
    user.xp = state.xp
    user.next_level_xp = state.next_level_xp
    return state


def was_rewarded(db: Session, user_id: int, title: str) -> bool:
    return (
        db.query(XpEventRecord.id)
        .filter(XpEventRecord.user_id == user_id, XpEventRecord.quest_title == title)
        .first()
        is not None
    )


def complete_quest(db: Session, user: User, quest: Quest, now: datetime) -> CompletionResult:
    """
    Marks a quest completed, records the XP event and levels the user up.
    A quest that is already completed, or whose title was completed before
    it was deleted and saved again, awards nothing.
    """
    if quest.status != QUEST_STATUS_COMPLETED and was_rewarded(db, user.id, quest.title):
        logger.info(f"User {user.id} already earned XP for quest '{quest.title}'")
        quest.status = QUEST_STATUS_COMPLETED
        quest.completed_at = now
        db.commit()
        db.refresh(quest)

    if quest.status == QUEST_STATUS_COMPLETED:
        state = sync_level_state(user)
        return CompletionResult(quest=quest, awarded=0, levels_gained=0, state=state, total_xp=user.total_xp or 0)

    amount = quest.xp_reward or 0
    new_total, state, levels_gained = apply_xp(user.total_xp or 0, amount)

    quest.status = QUEST_STATUS_COMPLETED
    quest.completed_at = now
    user.total_xp = new_total
    sync_level_state(user)
    db.add(XpEventRecord(
        user_id=user.id,
        quest_id=quest.id,
        quest_title=quest.title,
        amount=amount,
        created_at=now,
    ))
    db.commit()
    db.refresh(quest)

    if levels_gained:
        logger.info(f"User {user.id} reached level {state.level} (+{levels_gained})")

    return CompletionResult(
        quest=quest,
        awarded=amount,
        levels_gained=levels_gained,
        state=state,
        total_xp=new_total,
    )


def get_progress(user: User) -> dict:
    state = compute_level(user.total_xp or 0)
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        **state.to_dict(),
        "total_xp": user.total_xp or 0,
    }


def get_xp_history(db: Session, user: User, range_, now: datetime) -> dict:
    """Charts the user's XP events into the buckets of the requested range."""
    history_range = parse_range(range_)
    buckets = build_buckets(history_range, now)

    rows = (
        db.query(XpEventRecord.created_at, XpEventRecord.amount)
        .filter(
            XpEventRecord.user_id == user.id,
            XpEventRecord.created_at >= buckets[0].start,
            XpEventRecord.created_at < buckets[-1].end,
        )
        .all()
    )
    events = [XpEvent(timestamp=created_at, xp_amount=amount) for created_at, amount in rows]
    aggregate_events(buckets, events)

    return {
        "range": history_range.value,
        "buckets": [b.to_dict() for b in buckets],
    }
