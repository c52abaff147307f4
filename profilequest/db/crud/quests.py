from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from profilequest.db.models.quest import QUEST_STATUS_AVAILABLE, Quest


def list_quests(db: Session, user_id: int, status: Optional[str] = QUEST_STATUS_AVAILABLE) -> List[Quest]:
    query = db.query(Quest).filter(Quest.user_id == user_id)
    if status and status != "all":
        query = query.filter(Quest.status == status)
    return query.order_by(Quest.title).all()


def get_quest_by_title(db: Session, user_id: int, title: str) -> Quest | None:
    return db.query(Quest).filter(Quest.user_id == user_id, Quest.title == title).first()


def upsert_quests(db: Session, user_id: int, quests: Iterable) -> List[Quest]:
    """
    Inserts or refreshes quests keyed by (user_id, title).
    Completed quests keep their status so their XP cannot be earned twice.
    """
    existing = {q.title: q for q in db.query(Quest).filter(Quest.user_id == user_id).all()}
    saved = []

    for item in quests:
        quest = existing.get(item.title)
        if quest is None:
            quest = Quest(user_id=user_id, title=item.title, status=QUEST_STATUS_AVAILABLE)
            db.add(quest)
            existing[item.title] = quest
        quest.description = item.description
        quest.category = item.category
        quest.xp_reward = item.xp_reward
        saved.append(quest)

    db.commit()
    return saved


def delete_quest(db: Session, user_id: int, title: str) -> bool:
    quest = get_quest_by_title(db, user_id, title)
    if quest is None:
        return False
    db.delete(quest)
    db.commit()
    return True
