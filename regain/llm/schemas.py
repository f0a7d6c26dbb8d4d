"""LLM response schemas for structured output.

The strategy schema is static. The tag and selection schemas are built per
call so that their enums list exactly the tags or candidate ids the model may
return.
"""
from typing import Any

WEEKLY_PLAN_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "total_training_days": {
            "type": "integer",
            "description": "Total number of training days per week (typically between 3 and 6)",
            "minimum": 1,
            "maximum": 7,
        },
        "training_days": {
            "type": "array",
            "description": "Days of the week when training occurs. 0=Sunday, 1=Monday, ..., 6=Saturday",
            "items": {"type": "integer", "minimum": 0, "maximum": 6},
            "minItems": 1,
            "maxItems": 7,
        },
        "goal_description": {
            "type": "string",
            "description": "Overall purpose of the training system and how it serves the user's objectives",
        },
        "schedule": {
            "type": "array",
            "description": "One entry per training day, in the same order as training_days",
            "items": {
                "type": "object",
                "properties": {
                    "day_index": {
                        "type": "integer",
                        "description": "Day of the week (0=Sunday ... 6=Saturday), matching training_days",
                        "minimum": 0,
                        "maximum": 6,
                    },
                    "focus": {
                        "type": "string",
                        "description": "Primary strength focus of the day (e.g. 'Legs and glutes')",
                    },
                    "description": {
                        "type": "string",
                        "description": "Purpose of this specific session",
                    },
                    "system_goal": {
                        "type": "string",
                        "description": "How this session contributes to the overall training system",
                    },
                },
                "required": ["day_index", "focus", "description", "system_goal"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["total_training_days", "training_days", "goal_description", "schedule"],
    "additionalProperties": False,
}


def session_tags_schema(available_tags: list[str], min_tags: int, max_tags: int) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "target_tags": {
                "type": "array",
                "description": (
                    f"Between {min_tags} and {max_tags} tags that best represent the session, "
                    "chosen from the available tags"
                ),
                "items": {"type": "string", "enum": list(available_tags)},
                "minItems": min_tags,
                "maxItems": max_tags,
            },
        },
        "required": ["target_tags"],
        "additionalProperties": False,
    }


def phase_selection_schema(
    phase: str,
    candidate_ids: list[str],
    min_items: int,
    max_items: int,
) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "selected_variations": {
                "type": "array",
                "description": (
                    f"Between {min_items} and {max_items} {phase} variations, "
                    "each chosen from the provided list by its ID"
                ),
                "items": {
                    "type": "object",
                    "properties": {
                        "id": {
                            "type": "string",
                            "description": "ID of the selected variation",
                            "enum": list(candidate_ids),
                        },
                    },
                    "required": ["id"],
                    "additionalProperties": False,
                },
                "minItems": min_items,
                "maxItems": max_items,
            },
        },
        "required": ["selected_variations"],
        "additionalProperties": False,
    }
