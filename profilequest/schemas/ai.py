"""
Strict records for payloads coming back from the AI collaborators.

Model output is untrusted: everything is validated here before an XP reward
or attribute value reaches the leveling code or the database.
"""
import math
from typing import Dict

from pydantic import BaseModel, Field, field_validator

DEFAULT_XP_REWARD = 100
MAX_XP_REWARD = 10_000
DEFAULT_CATEGORY = "Skill Development"
QUEST_CATEGORIES = ("Skill Development", "Portfolio Building", "Networking", "Thought Leadership")

ATTRIBUTE_MIN = 1
ATTRIBUTE_MAX = 10


class GeneratedQuest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    category: str = DEFAULT_CATEGORY
    xp_reward: int = Field(default=DEFAULT_XP_REWARD, ge=0, le=MAX_XP_REWARD)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v):
        return "" if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        if not isinstance(v, str) or not v.strip():
            return DEFAULT_CATEGORY
        return v.strip()

    @field_validator("xp_reward", mode="before")
    @classmethod
    def default_reward(cls, v):
        if v is None or v == "":
            return DEFAULT_XP_REWARD
        if isinstance(v, bool):
            raise ValueError("xp_reward must be a number")
        return v


class GeneratedPersona(BaseModel):
    persona_type: str = Field(default="Adventurer", min_length=1, max_length=120)
    attributes: Dict[str, int] = Field(default_factory=dict)

    @field_validator("attributes", mode="before")
    @classmethod
    def clamp_attributes(cls, v):
        if not isinstance(v, dict):
            return {}
        clamped = {}
        for key, value in v.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                continue
            clamped[str(key)] = max(ATTRIBUTE_MIN, min(ATTRIBUTE_MAX, int(round(value))))
        return clamped


DEFAULT_PERSONA = GeneratedPersona(
    persona_type="Adventurer",
    attributes={"logic": 5, "creativity": 5, "communication": 5},
)
