import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from profilequest.db.session import init_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/db/bootstrap")
def bootstrap_db():
    """Creates any missing tables on demand."""
    try:
        init_db()
    except SQLAlchemyError as e:
        logger.error(f"Table bootstrap failed: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create tables")
    return {"ok": True}
