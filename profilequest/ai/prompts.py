# Prompt templates for ProfileQuest

QUEST_GENERATOR_PROMPT = """Generate 5 career quests for a {persona_type} at level {level}.
Categories: Skill Development, Portfolio Building, Networking, Thought Leadership

Return JSON array:
[
  {{"title":"...","description":"...","category":"...","xp_reward":100}}
]

Rules:
- Read these existing quests and DO NOT generate duplicates or near-duplicates (no paraphrases, no same intent):
{existing_json}
- Prefer fresh, more advanced tasks appropriate for level {level} and the persona {persona_type}.
- Keep titles unique, concise, and actionable."""

PERSONA_GENERATOR_PROMPT = """Using the following user inputs, infer a career persona and generate 5 beginner-friendly quests.
Check the web for the latest information on the topic and how the user should upskill to achieve the goals.

Inputs:
- Current Role: {current_role}
- Proficiency: {proficiency}/5
- Interests: {interests}
- Strengths: {strengths}
- Goals: {goals}

Return ONLY valid JSON with this exact shape (no extra text):
{{
  "persona": {{
    "persona_type": "Software Developer",
    "attributes": {{ "logic": 7, "creativity": 6, "communication": 5 }}
  }},
  "quests": [
    {{ "title": "...", "description": "...", "category": "Skill Development", "xp_reward": 100 }}
  ]
}}

Guidelines:
- attributes are integers 1-10
- Include 5 quests across categories: Skill Development, Portfolio Building, Networking, Thought Leadership
- Keep titles concise and actionable"""

PERSONA_AVATAR_PROMPT = (
    "Create a 1024x1024 square avatar in {style} style based on this persona: {persona_json}. "
    "Consider role={current_role}, proficiency={proficiency}/5, interests={interests}, "
    "strengths={strengths}, goals={goals}."
)

BADGE_AVATAR_PROMPT = """Create a 1024x1024 square picture in {style} style. Imagine that this is a badge and the picture is the identity of the user, let your imagination run wild.
Use these details: role={current_role}, proficiency={proficiency}/5, interests={interests}, strengths={strengths}, goals={goals}.
Return only the image based on the face likeness if a reference image is provided.
Make sure it looks like a unicode emoji
Generate exactly 256x256 square."""

# Cap on the serialized existing-quest list embedded in the quest prompt.
EXISTING_QUESTS_PROMPT_LIMIT = 8000
