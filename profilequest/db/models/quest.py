from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from profilequest.db.base_class import Base

QUEST_STATUS_AVAILABLE = "available"
QUEST_STATUS_COMPLETED = "completed"


class Quest(Base):
    __tablename__ = "quests"
    __table_args__ = (
        UniqueConstraint("user_id", "title", name="quests_user_id_title_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    xp_reward = Column(BigInteger, nullable=False, default=100)
    status = Column(String, nullable=False, default=QUEST_STATUS_AVAILABLE)
    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="quests")

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "xp_reward": self.xp_reward,
            "status": self.status,
        }
