from typing import Dict, Optional

from pydantic import BaseModel, Field

from profilequest.schemas.ai import GeneratedPersona


class PersonaSaveRequest(BaseModel):
    persona: GeneratedPersona
    avatar: Optional[str] = None


class PersonaGenerateRequest(BaseModel):
    interests: str = ""
    strengths: str = ""
    goals: str = ""
    currentRole: str = ""
    proficiency: int = Field(default=3, ge=1, le=5)
    imageBase64: str = ""


class AvatarPromptMeta(BaseModel):
    currentRole: str = ""
    proficiency: int = Field(default=3, ge=1, le=5)
    interests: str = ""
    strengths: str = ""
    goals: str = ""


class AvatarGenerateRequest(BaseModel):
    promptMeta: AvatarPromptMeta = Field(default_factory=AvatarPromptMeta)
    imageBase64: str = ""


class PersonaResponse(BaseModel):
    persona_type: str
    attributes: Dict[str, int]
    avatar: Optional[str] = None
