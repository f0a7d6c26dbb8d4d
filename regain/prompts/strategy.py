"""Prompt for the strategy planner (permanent weekly plan)."""
from regain.llm.schemas import WEEKLY_PLAN_SCHEMA
from regain.llm.structured import StructuredRequest
from regain.schemas.profile import UserProfile

STRATEGY_SYSTEM_INSTRUCTION = """ROLE: You are an Elite Physiotherapist and Strength & Conditioning Coach specializing in the 20-35 age demographic who seek to gain strength without compromising mobility and flexibility.
Your expertise lies in designing "Holistic Strength" systems: balancing hypertrophy and raw strength with rigorous mobility, flexibility and longevity protocols.

### TASK

Generate a **Permanent Weekly Training Plan**. It is the skeleton of the user's weekly cycle: it defines *when* they train and *what* each day is for, not the specific exercises.

### HARD CONSTRAINTS

1. **Holistic coverage:** across the week the days together MUST cover all major muscle groups and movement patterns. Do not neglect antagonists.
2. **Strength orientation:** EVERY training day's focus must be strength-oriented. Mobility and flexibility work is woven into a strength day, never a day of its own.

### GUIDELINES

- If a metric is low (<40), address the deficit explicitly in that day's focus or system goal (e.g. "Legs + Hip Mobility Focus").
- If discomforts are present, structure the focus to avoid aggravating them (e.g. with "Lower Back Pain" avoid heavy spinal loading).
- If the user prefers a discipline, use its terminology in focus and description while keeping a sound biomechanical foundation.
- Choose 3 to 6 training days depending on how ambitious the objectives are, with adequate rest days.
- The structure repeats every week and must stay sustainable while allowing weekly variety in exercise selection.
- training_days and schedule must list the same days in the same order (0=Sunday ... 6=Saturday). Do not include a start date."""

STRATEGY_USER_TEMPLATE = """USER PROFILE

1. **Baseline Metrics** (0-100, <40 is poor and >80 is excellent):
   - Mobility: {mobility}
   - Flexibility: {flexibility}
   - Rotation: {rotation}

2. **Physical Discomforts/Injuries:**
{discomforts}

3. **Primary Objectives:**
{objectives}

4. **Preferred Discipline:**
{preferred_discipline}

Generate a professional, balanced plan aligned with Holistic Strength principles."""


def _bullets(items: list[str], empty: str) -> str:
    if not items:
        return f"   - {empty}"
    return "\n".join(f"   - {item}" for item in items)


def build_strategy_request(profile: UserProfile) -> StructuredRequest:
    return StructuredRequest(
        schema_name="weekly_plan",
        system_instruction=STRATEGY_SYSTEM_INSTRUCTION,
        user_template=STRATEGY_USER_TEMPLATE,
        output_schema=WEEKLY_PLAN_SCHEMA,
        context_variables={
            "mobility": profile.metrics.mobility,
            "flexibility": profile.metrics.flexibility,
            "rotation": profile.metrics.rotation,
            "discomforts": _bullets(profile.discomforts, "None specified"),
            "objectives": _bullets(profile.objectives, "Not specified"),
            "preferred_discipline": _bullets(
                [profile.preferred_discipline] if profile.preferred_discipline else [],
                "Not specified",
            ),
        },
    )
