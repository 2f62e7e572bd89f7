"""LLM instruction sets for classification and per-shape cleaning.

Prompts are passed to the chat template as variables, never as template
text, so literal braces in the JSON examples need no escaping.
"""

import json
from types import MappingProxyType

from harbourmaster.models.enums import Shape, require_every_shape

# Common instruction to suppress thinking and ensure JSON-only output
JSON_ONLY_INSTRUCTION = """
CRITICAL: You MUST respond with ONLY a valid JSON object.
- Do NOT include any thinking, reasoning, or explanation.
- Do NOT use markdown code blocks.
- Start your response directly with the opening brace
- No text before or after the JSON."""


# =============================================================================
# Shape classification (fallback path)
# =============================================================================

CLASSIFIER_SYSTEM_PROMPT = "You are a precise data classifier. Always output valid JSON." + JSON_ONLY_INSTRUCTION

CLASSIFIER_USER_PROMPT = """You are a data classifier for the Harbourmaster system.

Analyze the following transcript and determine which record shape it belongs to.

SHAPES:
1. harbour_questions - Q&A about sailing, mooring, facilities, hazards at specific harbours
2. harbours - Master records for harbours (name, location, coordinates, type, general info)
3. harbour_weather_profiles - Weather patterns, shelter analysis, wind directions for harbours
4. harbour_media - Photos, videos, tutorials, diagrams related to harbours

TRANSCRIPT:
{transcript}

Respond with ONLY this JSON structure:
{{
  "shape": "harbour_questions" | "harbours" | "harbour_weather_profiles" | "harbour_media",
  "confidence": 0.0-1.0,
  "reasoning": "brief explanation"
}}"""


# =============================================================================
# Per-shape cleaning instructions
# =============================================================================

def _instructions(title: str, example: dict, rules: list[str]) -> str:
    lines = [
        f"You are the Harbourmaster Cleaner for {title}.",
        "Convert the input into strict JSON matching this schema:",
        json.dumps(example),
        "Rules:",
        *rules,
        "- Do not add any fields not in the schema.",
        "- Output ONLY the JSON object, no prose.",
    ]
    return "\n".join(lines) + JSON_ONLY_INSTRUCTION


QNA_CLEANING_PROMPT = _instructions(
    "Q&A entries",
    {
        "harbour": "string",
        "question": "string",
        "answer": "string",
        "category": "Approach & Entry | Mooring | Anchoring | Weather & Shelter | Safety & Hazards | "
                    "Facilities & Services | Local Knowledge | Media Tutorials | General",
        "tags": ["domain-prefixed tags like mooring:stern_to, facility:water"],
        "tier": "free | pro | exclusive",
        "notes": None,
    },
    [
        "- Use domain-prefixed, lowercase tags (mooring:*, facility:*, weather:*, hazard:*, anchor:*, scope:*).",
        "- Include a scope tag: scope:harbour | scope:island | scope:region | scope:global.",
        "- If tier=pro, the answer must be numbered steps (1. 2. 3.). If tier=free, keep to <= 2 sentences.",
        "- Do NOT invent specific depths or facilities if unknown.",
        "- Front-load hazards when relevant.",
    ],
)

HARBOUR_CLEANING_PROMPT = _instructions(
    "harbour master records",
    {
        "name": "string",
        "region": "string (e.g., 'Ionian', 'Ithaca')",
        "harbour_type": "harbour | anchorage | bay | marina",
        "coordinates": {"lat": "number", "lng": "number"},
        "description": "string (max 1000 chars)",
        "facilities": ["water", "fuel", "electricity", "wifi", "showers", "restaurant",
                       "provisions", "chandlery", "laundry", "repair"],
        "capacity": "integer (number of berths)",
        "depth_range": "string (e.g., '3-8m')",
        "notes": None,
    },
    [
        "- Coordinates must be decimal degrees; south and west are negative.",
        "- harbour_type must be lowercase: harbour, anchorage, bay, or marina.",
        "- facilities must use the exact lowercase values listed.",
        "- depth_range format: 'X-Ym' (e.g., '3.5-8m').",
    ],
)

WEATHER_CLEANING_PROMPT = _instructions(
    "weather profiles",
    {
        "harbour_name": "string",
        "wind_directions": {
            "sheltered_from": ["n", "ne", "e", "se", "s", "sw", "w", "nw"],
            "exposed_to": ["n", "ne", "e", "se", "s", "sw", "w", "nw"],
        },
        "shelter_quality": "excellent | good | moderate | poor",
        "swell_surge": {"susceptible": "boolean", "conditions": "string (when swell/surge occurs)"},
        "best_conditions": "string (ideal weather)",
        "warnings": "string (weather warnings)",
        "notes": None,
    },
    [
        "- Wind directions must be lowercase: n, ne, e, se, s, sw, w, nw.",
        "- shelter_quality must be lowercase: excellent, good, moderate, or poor.",
    ],
)

MEDIA_CLEANING_PROMPT = _instructions(
    "media records",
    {
        "harbour_name": "string",
        "media_type": "photo | video | aerial | tutorial | diagram",
        "title": "string (3-200 chars)",
        "url": "string (valid URL)",
        "description": "string (max 1000 chars)",
        "category": "Approach & Entry | Mooring | Anchoring | Weather & Shelter | Safety & Hazards | "
                    "Facilities & Services | Local Knowledge | General",
        "tags": ["domain-prefixed tags"],
        "tier": "free | pro | exclusive",
        "duration": "string (M:SS format for videos)",
        "notes": None,
    },
    [
        "- media_type must be lowercase: photo, video, aerial, tutorial, or diagram.",
        "- tier must be lowercase: free, pro, or exclusive.",
        "- duration only for videos, format: M:SS (e.g., '3:45').",
        "- URL must be valid and complete.",
    ],
)

CLEANING_PROMPTS = MappingProxyType({
    Shape.QNA: QNA_CLEANING_PROMPT,
    Shape.HARBOUR: HARBOUR_CLEANING_PROMPT,
    Shape.WEATHER_PROFILE: WEATHER_CLEANING_PROMPT,
    Shape.MEDIA: MEDIA_CLEANING_PROMPT,
})

require_every_shape(CLEANING_PROMPTS, "CLEANING_PROMPTS")

CLEANER_USER_PROMPT = "Input:\n{transcript}"
