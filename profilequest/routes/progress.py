from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from profilequest.core.dependencies import Clock, get_clock, get_current_user
from profilequest.db.models.user import User
from profilequest.db.session import get_db
from profilequest.services.progression import get_progress, get_xp_history
from profilequest.services.xp_history import HistoryRange

router = APIRouter(prefix="/api", tags=["progress"])


@router.get("/progress")
def read_progress(current_user: User = Depends(get_current_user)):
    return {"progress": get_progress(current_user)}


@router.get("/xp/history")
def read_xp_history(
    range_: str = Query(default=HistoryRange.WEEKLY.value, alias="range"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """XP earned per bucket for the daily, weekly, monthly or yearly chart."""
    return get_xp_history(db, current_user, range_, clock())
