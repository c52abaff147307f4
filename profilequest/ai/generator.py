import json
import logging
import re
from typing import Any, Iterable, List, Optional, Tuple

import openai
from pydantic import ValidationError

from profilequest.ai.prompts import (
    EXISTING_QUESTS_PROMPT_LIMIT,
    PERSONA_GENERATOR_PROMPT,
    QUEST_GENERATOR_PROMPT,
)
from profilequest.core.config import settings
from profilequest.core.utils import normalize_title, round_half_up
from profilequest.schemas.ai import (
    DEFAULT_PERSONA,
    MAX_XP_REWARD,
    QUEST_CATEGORIES,
    GeneratedPersona,
    GeneratedQuest,
)

logger = logging.getLogger(__name__)

QUESTS_PER_BATCH = 5
FALLBACK_MIN_REWARD = 50
FALLBACK_REWARD_GROWTH = 1.15
# 1.15 ** 100 is already far past MAX_XP_REWARD / 100
FALLBACK_GROWTH_LEVELS = 100

_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json(content: Optional[str]) -> Any:
    """
    Parses model output as JSON, falling back to the outermost [...] or {...}
    substring when the model wrapped the payload in prose or code fences.
    Returns None when nothing parses.
    """
    if not content:
        return None
    try:
        return json.loads(content)
    except ValueError:
        pass

    for pattern in (_ARRAY_RE, _OBJECT_RE):
        match = pattern.search(content)
        if not match:
            continue
        try:
            return json.loads(match.group(0))
        except ValueError:
            continue
    return None


def validate_quests(items: Any) -> List[GeneratedQuest]:
    """Keeps the items that validate as quests, drops the rest."""
    if not isinstance(items, list):
        return []
    quests = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            quests.append(GeneratedQuest.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Dropping invalid generated quest: {e.errors()}")
    return quests


def parse_quests(content: Optional[str]) -> List[GeneratedQuest]:
    payload = extract_json(content)
    if isinstance(payload, dict):
        payload = payload.get("quests")
    return validate_quests(payload)


def parse_persona_payload(content: Optional[str]) -> Tuple[GeneratedPersona, List[GeneratedQuest]]:
    payload = extract_json(content)
    if not isinstance(payload, dict):
        return DEFAULT_PERSONA, []

    persona = DEFAULT_PERSONA
    raw_persona = payload.get("persona")
    if isinstance(raw_persona, dict):
        try:
            persona = GeneratedPersona.model_validate(raw_persona)
        except ValidationError as e:
            logger.warning(f"Invalid persona from model, using default: {e.errors()}")

    return persona, validate_quests(payload.get("quests"))


def fallback_reward(level: int) -> int:
    """100 XP at level 1, +15% per level, between 50 and MAX_XP_REWARD."""
    exponent = min(level - 1, FALLBACK_GROWTH_LEVELS)
    reward = round_half_up(100 * FALLBACK_REWARD_GROWTH ** exponent)
    return min(MAX_XP_REWARD, max(FALLBACK_MIN_REWARD, reward))


def fallback_quests(persona_type: str, level: int) -> List[GeneratedQuest]:
    reward = fallback_reward(level)
    return [
        GeneratedQuest(
            title=f"{persona_type} L{level} Quest {i + 1}",
            description=f"A level {level} task to advance as a {persona_type}.",
            category=QUEST_CATEGORIES[i % len(QUEST_CATEGORIES)],
            xp_reward=reward,
        )
        for i in range(QUESTS_PER_BATCH)
    ]


def dedupe_quests(quests: Iterable[GeneratedQuest], existing_titles: Iterable[str]) -> List[GeneratedQuest]:
    """Drops quests whose normalized title is already taken or repeated."""
    taken = {normalize_title(t) for t in existing_titles}
    taken.discard("")
    unique = []
    for quest in quests:
        key = normalize_title(quest.title)
        if not key or key in taken:
            continue
        taken.add(key)
        unique.append(quest)
    return unique


class GenerationService:
    """
    Quest and persona generation through an OpenAI-compatible chat API.
    Without an API key the service runs simulated and returns deterministic
    content, so the rest of the app keeps working offline.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        api_key = api_key or settings.LLM_API_KEY
        if api_key:
            self.async_client = openai.AsyncOpenAI(
                api_key=api_key,
                base_url=base_url or settings.LLM_BASE_URL,
            )
            self.simulated = False
        else:
            self.async_client = None
            self.simulated = True

    async def generate_quests(self, persona_type: str, level: int, existing: List[dict]) -> List[GeneratedQuest]:
        existing_json = json.dumps(existing or [])[:EXISTING_QUESTS_PROMPT_LIMIT]
        prompt = QUEST_GENERATOR_PROMPT.format(
            persona_type=persona_type,
            level=level,
            existing_json=existing_json,
        )

        quests = []
        if not self.simulated:
            content = await self._complete(prompt, settings.LLM_QUEST_MODEL)
            quests = parse_quests(content)

        if not quests:
            quests = fallback_quests(persona_type, level)

        return dedupe_quests(quests, (q.get("title") for q in existing or []))

    async def generate_persona(
        self,
        current_role: str = "",
        proficiency: int = 3,
        interests: str = "",
        strengths: str = "",
        goals: str = "",
    ) -> Tuple[GeneratedPersona, List[GeneratedQuest]]:
        if self.simulated:
            persona = self._simulated_persona(current_role, proficiency)
            return persona, fallback_quests(persona.persona_type, 1)

        prompt = PERSONA_GENERATOR_PROMPT.format(
            current_role=current_role,
            proficiency=proficiency,
            interests=interests,
            strengths=strengths,
            goals=goals,
        )
        content = await self._complete(prompt, settings.LLM_PERSONA_MODEL)
        persona, quests = parse_persona_payload(content)
        if not quests:
            quests = fallback_quests(persona.persona_type, 1)
        return persona, dedupe_quests(quests, [])

    def _simulated_persona(self, current_role: str, proficiency: int) -> GeneratedPersona:
        role = current_role.strip()
        if not role:
            return DEFAULT_PERSONA
        base = 3 + proficiency
        return GeneratedPersona(
            persona_type=role.title(),
            attributes={"logic": base, "creativity": base - 1, "communication": base - 2},
        )

    async def _complete(self, prompt: str, model: str) -> Optional[str]:
        messages = [{"role": "user", "content": prompt}]
        try:
            response = await self.async_client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=settings.LLM_TEMPERATURE,
            )
            return response.choices[0].message.content
        except (openai.NotFoundError, openai.BadRequestError) as e:
            logger.warning(f"Model {model} failed ({e}). Switching to fallback: {settings.LLM_FALLBACK_MODEL}.")
            try:
                response = await self.async_client.chat.completions.create(
                    model=settings.LLM_FALLBACK_MODEL,
                    messages=messages,
                    temperature=settings.LLM_TEMPERATURE,
                )
                return response.choices[0].message.content
            except openai.OpenAIError as e_fallback:
                logger.error(f"Fallback model {settings.LLM_FALLBACK_MODEL} also failed: {e_fallback}")
                return None
        except openai.OpenAIError as e:
            logger.error(f"LLM error: {e}")
            return None


generation_service = GenerationService()


def get_generation_service() -> GenerationService:
    return generation_service
