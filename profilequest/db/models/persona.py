from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from profilequest.db.base_class import Base


class Persona(Base):
    __tablename__ = "personas"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    persona_type = Column(String, nullable=False)
    # {"logic": 7, "creativity": 6, "communication": 5}
    attributes = Column(JSON, nullable=False, default=dict)
    avatar = Column(Text, nullable=True)  # data URL
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="persona")
