from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from profilequest.db.base_class import Base


class XpEventRecord(Base):
    """One row per quest completion. Never updated."""
    __tablename__ = "xp_events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quest_id = Column(Integer, ForeignKey("quests.id", ondelete="SET NULL"), nullable=True)
    # Outlives the quest row, so a deleted and re-saved quest is not paid twice.
    quest_title = Column(String, nullable=True, index=True)
    amount = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="xp_events")
