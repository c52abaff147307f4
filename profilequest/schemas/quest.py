from typing import List, Optional

from pydantic import BaseModel, Field

from profilequest.schemas.ai import GeneratedQuest


class ExistingQuest(BaseModel):
    title: str
    description: Optional[str] = None
    category: Optional[str] = None


class QuestGenerateRequest(BaseModel):
    personaType: Optional[str] = None
    level: Optional[int] = Field(default=None, ge=1)
    existingTitles: List[str] = Field(default_factory=list)
    existing: List[ExistingQuest] = Field(default_factory=list)


class QuestSaveRequest(BaseModel):
    quests: List[GeneratedQuest]


class QuestTitleRequest(BaseModel):
    title: str = Field(min_length=1)
