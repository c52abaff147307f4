from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from profilequest.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="Adventurer")
    hashed_password = Column(String, nullable=False)

    # XP ledger. total_xp is authoritative; level/xp/next_level_xp are a
    # cache of compute_level(total_xp) kept for cheap reads.
    total_xp = Column(BigInteger, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    xp = Column(BigInteger, nullable=False, default=0)
    next_level_xp = Column(BigInteger, nullable=False, default=100)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    persona = relationship("Persona", back_populates="user", uselist=False, cascade="all, delete-orphan")
    quests = relationship("Quest", back_populates="user", cascade="all, delete-orphan")
    xp_events = relationship("XpEventRecord", back_populates="user", cascade="all, delete-orphan")
