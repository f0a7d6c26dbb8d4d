"""Prompt for the phase orchestrator (tag selection for one training day)."""
from regain.llm.schemas import session_tags_schema
from regain.llm.structured import StructuredRequest
from regain.schemas.plan import TrainingDayPlan

ORCHESTRATOR_SYSTEM_INSTRUCTION = """ROLE: You are an Elite Physiotherapist and Strength & Conditioning Coach specializing in exercise selection and movement pattern analysis.

### TASK

Select the catalog tags that best describe what today's session must train. The tags drive which exercises are offered for the warmup, workout and cooldown phases.

### GUIDELINES

- Select between {min_tags} and {max_tags} tags, only from the available list.
- Cover the primary focus areas of the session description and the movement patterns it emphasises.
- Include modality tags (unilateral, isometric, explosive...) only when they are a key characteristic of the session.
- Include mobility or flexibility tags when the description or system goal calls for them.
- Prefer specificity: do not select tags that are not directly relevant."""

ORCHESTRATOR_USER_TEMPLATE = """### TRAINING DAY CONTEXT

**Focus:**
{focus}

**Session Description:**
{description}

**System Goal (how this session contributes to the training system):**
{system_goal}

**Overall training system rationale:**
{goal_description}

### AVAILABLE TAGS

{available_tags}"""


def build_orchestrator_request(
    day: TrainingDayPlan,
    goal_description: str,
    available_tags: list[str],
    min_tags: int,
    max_tags: int,
) -> StructuredRequest:
    return StructuredRequest(
        schema_name="session_tags",
        system_instruction=ORCHESTRATOR_SYSTEM_INSTRUCTION.format(min_tags=min_tags, max_tags=max_tags),
        user_template=ORCHESTRATOR_USER_TEMPLATE,
        output_schema=session_tags_schema(available_tags, min_tags, max_tags),
        context_variables={
            "focus": day.focus,
            "description": day.description,
            "system_goal": day.system_goal,
            "goal_description": goal_description,
            "available_tags": "\n".join(f"- {tag}" for tag in available_tags),
        },
    )
