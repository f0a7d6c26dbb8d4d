"""Prompts for the warmup, workout and cooldown selectors."""
from regain.config.pipeline_config_loader import SelectionBounds
from regain.llm.schemas import phase_selection_schema
from regain.llm.structured import StructuredRequest
from regain.schemas.plan import TrainingDayPlan
from regain.schemas.variation import Phase, ScoredVariation

SELECTOR_ROLE = """ROLE: You are an Elite Physiotherapist and Strength & Conditioning Coach specializing in the 20-35 age demographic.
Your expertise lies in designing "Holistic Strength" systems: balancing hypertrophy and raw strength with rigorous mobility, flexibility and longevity protocols."""

PHASE_GUIDELINES: dict[Phase, str] = {
    Phase.WARMUP: """### WARMUP PHASE GUIDELINES

The warmup prepares the body for the main workout by:
- Activating the cardiovascular system (light cardio, dynamic movements)
- Mobilizing joints and increasing range of motion
- Activating core stability
- Rehearsing the movement patterns the workout will load

Order the selection as a progression: start light and build towards the workout.""",
    Phase.WORKOUT: """### WORKOUT PHASE GUIDELINES

The workout is the core of the session:
- Primary strength and hypertrophy development
- Movement pattern mastery and progressive overload
- Strength without compromising mobility

**CRITICAL: include variations from at least {min_disciplines} different disciplines.**
Balance opposing patterns (push/pull, squat/hinge) where the focus allows.""",
    Phase.COOLDOWN: """### COOLDOWN PHASE GUIDELINES

The cooldown brings the body back to rest and protects long-term mobility:
- Down-regulating heart rate and breathing
- Restoring range of motion in the tissues the workout loaded
- Flexibility and mobility work matched to the session focus""",
}

SCORE_EXPLANATION = """### SCORE EXPLANATION

Each candidate's score is the number of today's target tags it shares. Higher scores mean closer alignment with the session focus. Use scores as guidance, but prioritise movement quality, progression and variety over raw score."""

SELECTOR_TASK = """### TASK

Select between {min_items} and {max_items} variations for the {phase} phase, using only IDs from the candidate list. Each ID at most once, listed in the order they should be performed."""

SELECTOR_USER_TEMPLATE = """### TRAINING SESSION CONTEXT

**Focus:** {focus}

**Session Description:**
{description}

**System Goal:**
{system_goal}

**Overall training system rationale:**
{goal_description}

### CANDIDATE VARIATIONS (pre-scored by relevance)

{candidates}"""


def format_candidates(candidates: list[ScoredVariation]) -> str:
    lines = []
    for idx, scored in enumerate(candidates, start=1):
        v = scored.variation
        tags = ", ".join(v.tags) if v.tags else "none"
        disciplines = ", ".join(v.disciplines) if v.disciplines else "none"
        lines.append(
            f"{idx}. **{v.name}** (Score: {scored.score})\n"
            f"   - Tags: {tags}\n"
            f"   - Disciplines: {disciplines}\n"
            f"   - ID: {v.id}"
        )
    return "\n\n".join(lines)


def build_selector_request(
    phase: Phase,
    day: TrainingDayPlan,
    goal_description: str,
    candidates: list[ScoredVariation],
    bounds: SelectionBounds,
) -> StructuredRequest:
    system_instruction = "\n\n".join([
        SELECTOR_ROLE,
        PHASE_GUIDELINES[phase].format(min_disciplines=bounds.min_disciplines),
        SCORE_EXPLANATION,
        SELECTOR_TASK.format(
            min_items=bounds.min_items,
            max_items=bounds.max_items,
            phase=phase.value,
        ),
    ])
    return StructuredRequest(
        schema_name=f"{phase.value}_selection",
        system_instruction=system_instruction,
        user_template=SELECTOR_USER_TEMPLATE,
        output_schema=phase_selection_schema(
            phase.value,
            [c.variation.id for c in candidates],
            bounds.min_items,
            bounds.max_items,
        ),
        context_variables={
            "focus": day.focus,
            "description": day.description,
            "system_goal": day.system_goal,
            "goal_description": goal_description,
            "candidates": format_candidates(candidates),
        },
    )
