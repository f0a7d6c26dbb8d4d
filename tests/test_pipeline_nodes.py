"""
Tests for the LLM-backed pipeline nodes.

Each node is driven by a scripted provider so the tests cover prompt
construction, output validation and the typed failures.
"""
import asyncio
import json
from datetime import date

import pytest

from regain.core.exceptions import SchemaViolation
from regain.llm.base import LLMConfig, LLMProvider, LLMResponse, Message
from regain.llm.structured import StructuredLLMClient
from regain.schemas.plan import TrainingDayPlan
from regain.schemas.profile import UserMetrics, UserProfile
from regain.schemas.variation import Phase, ScoredPool, ScoredVariation, Variation
from regain.services.assembler import assemble_session, session_discipline
from regain.services.phase_orchestrator import PhaseOrchestrator
from regain.services.phase_selectors import PhaseSelectors
from regain.services.strategy_planner import StrategyPlanner


class ScriptedProvider(LLMProvider):
    """Returns a fixed payload per schema name and records every request."""

    def __init__(self, payloads: dict, delay: float = 0.0):
        self.payloads = payloads
        self.delay = delay
        self.requests: list[tuple[list[Message], LLMConfig]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def chat(self, messages, config):
        self.requests.append((messages, config))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            data = self.payloads[config.schema_name]
        finally:
            self.in_flight -= 1
        return LLMResponse(content=json.dumps(data), structured_data=data)


DAY = TrainingDayPlan(
    index=0,
    day_of_week=1,
    date=date(2026, 10, 19),
    focus="Legs + Hip Mobility",
    description="Squat and hinge patterns with hip opening",
    system_goal="Lower body strength base",
)

PROFILE = UserProfile(
    metrics=UserMetrics(mobility=30, flexibility=55, rotation=70),
    discomforts=["lower back"],
    objectives=["build strength"],
)


def candidates(prefix, disciplines_cycle, n=6):
    return [
        ScoredVariation(
            variation=Variation(
                id=f"{prefix}{i}",
                name=f"{prefix.upper()} {i}",
                tags=["strength"],
                disciplines=[disciplines_cycle[i % len(disciplines_cycle)]],
            ),
            score=n - i,
        )
        for i in range(n)
    ]


def selection(*ids):
    return {"selected_variations": [{"id": i} for i in ids]}


class TestStrategyPlanner:
    @pytest.mark.asyncio
    async def test_plan_gets_dates(self):
        provider = ScriptedProvider({
            "weekly_plan": {
                "total_training_days": 2,
                "training_days": [2, 4],
                "goal_description": "  Strength with mobility  ",
                "schedule": [
                    {"day_index": 2, "focus": "Legs", "description": "Squat", "system_goal": "Base"},
                    {"day_index": 4, "focus": "Upper", "description": "Press", "system_goal": "Balance"},
                ],
            }
        })
        planner = StrategyPlanner(StructuredLLMClient(provider, timeout=1))

        plan = await planner.plan_week(PROFILE, date(2026, 10, 18))

        assert plan.start_date == date(2026, 10, 20)
        assert [d.date for d in plan.days] == [date(2026, 10, 20), date(2026, 10, 22)]
        assert [d.index for d in plan.days] == [0, 1]
        assert plan.goal_description == "Strength with mobility"

        messages, config = provider.requests[0]
        assert config.schema_name == "weekly_plan"
        assert "Mobility: 30" in messages[1].content
        assert "lower back" in messages[1].content

    @pytest.mark.asyncio
    async def test_inconsistent_plan_is_rejected(self):
        provider = ScriptedProvider({
            "weekly_plan": {
                "total_training_days": 3,
                "training_days": [1, 3],
                "goal_description": "Strength",
                "schedule": [],
            }
        })
        planner = StrategyPlanner(StructuredLLMClient(provider, timeout=1))

        with pytest.raises(SchemaViolation) as exc_info:
            await planner.plan_week(PROFILE, date(2026, 10, 18))
        assert exc_info.value.node == "strategy_planner"


class TestPhaseOrchestrator:
    TAGS = ["core", "glutes", "hips", "legs", "push", "strength"]

    @pytest.mark.asyncio
    async def test_selects_normalized_tags(self, pipeline_config):
        provider = ScriptedProvider({"session_tags": {"target_tags": ["Legs", "glutes", "hips", "legs"]}})
        orchestrator = PhaseOrchestrator(StructuredLLMClient(provider, timeout=1), pipeline_config.orchestrator)

        tags = await orchestrator.select_tags(DAY, "Strength", self.TAGS)

        assert tags == frozenset({"legs", "glutes", "hips"})
        schema = provider.requests[0][1].json_schema
        assert schema["properties"]["target_tags"]["items"]["enum"] == self.TAGS

    @pytest.mark.asyncio
    async def test_unknown_tag_rejected(self, pipeline_config):
        provider = ScriptedProvider({"session_tags": {"target_tags": ["legs", "glutes", "lasers"]}})
        orchestrator = PhaseOrchestrator(StructuredLLMClient(provider, timeout=1), pipeline_config.orchestrator)

        with pytest.raises(SchemaViolation) as exc_info:
            await orchestrator.select_tags(DAY, "Strength", self.TAGS)
        assert exc_info.value.details["unknown_tags"] == ["lasers"]

    @pytest.mark.asyncio
    async def test_too_few_tags_rejected(self, pipeline_config):
        provider = ScriptedProvider({"session_tags": {"target_tags": ["legs"]}})
        orchestrator = PhaseOrchestrator(StructuredLLMClient(provider, timeout=1), pipeline_config.orchestrator)

        with pytest.raises(SchemaViolation):
            await orchestrator.select_tags(DAY, "Strength", self.TAGS)

    @pytest.mark.asyncio
    async def test_bounds_shrink_to_small_catalog(self, pipeline_config):
        provider = ScriptedProvider({"session_tags": {"target_tags": ["legs", "core"]}})
        orchestrator = PhaseOrchestrator(StructuredLLMClient(provider, timeout=1), pipeline_config.orchestrator)

        tags = await orchestrator.select_tags(DAY, "Strength", ["core", "legs"])
        assert tags == frozenset({"legs", "core"})


def pool():
    return ScoredPool(
        warmup=candidates("wu", ["mobility"]),
        workout=candidates("w", ["strength", "pilates"]),
        cooldown=candidates("cd", ["yoga"]),
    )


class TestPhaseSelectors:
    @pytest.mark.asyncio
    async def test_selectors_run_concurrently(self, pipeline_config):
        provider = ScriptedProvider(
            {
                "warmup_selection": selection("wu2", "wu0", "wu1"),
                "workout_selection": selection("w0", "w1", "w2", "w3"),
                "cooldown_selection": selection("cd0", "cd1", "cd2"),
            },
            delay=0.05,
        )
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)

        selections = await selectors.select_all(DAY, "Strength", pool())

        assert provider.max_in_flight == 3
        # the model's order is the phase order
        assert [v.id for v in selections[Phase.WARMUP]] == ["wu2", "wu0", "wu1"]
        assert [v.score for v in selections[Phase.WARMUP]] == [4, 6, 5]

    @pytest.mark.asyncio
    async def test_candidate_ids_enumerated_in_schema(self, pipeline_config):
        provider = ScriptedProvider({"cooldown_selection": selection("cd0", "cd1", "cd2")})
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)

        await selectors.select_phase(Phase.COOLDOWN, DAY, "Strength", pool().cooldown)

        messages, config = provider.requests[0]
        items = config.json_schema["properties"]["selected_variations"]
        assert items["items"]["properties"]["id"]["enum"] == [f"cd{i}" for i in range(6)]
        assert (items["minItems"], items["maxItems"]) == (3, 4)
        assert "ID: cd5" in messages[1].content

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "phase,payload,detail",
        [
            (Phase.WARMUP, selection("wu0", "wu0", "wu1"), "duplicate_ids"),
            (Phase.WARMUP, selection("wu0", "wu1", "w3"), "unknown_ids"),
            (Phase.COOLDOWN, selection("cd0", "cd1", "cd2", "cd3", "cd4"), "selected_count"),
            (Phase.WORKOUT, selection("w0", "w1", "w2"), "selected_count"),
        ],
    )
    async def test_invalid_selections(self, pipeline_config, phase, payload, detail):
        provider = ScriptedProvider({f"{phase.value}_selection": payload})
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)

        with pytest.raises(SchemaViolation) as exc_info:
            await selectors.select_phase(phase, DAY, "Strength", pool().for_phase(phase))

        assert exc_info.value.node == f"{phase.value}_selector"
        assert detail in exc_info.value.details

    @pytest.mark.asyncio
    async def test_workout_needs_two_disciplines(self, pipeline_config):
        # even indices are all "strength"
        provider = ScriptedProvider({"workout_selection": selection("w0", "w2", "w4", "w6")})
        workout = candidates("w", ["strength", "pilates"], n=8)
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)

        with pytest.raises(SchemaViolation) as exc_info:
            await selectors.select_phase(Phase.WORKOUT, DAY, "Strength", workout)
        assert exc_info.value.details["disciplines"] == ["strength"]

    @pytest.mark.asyncio
    async def test_one_failing_selector_fails_the_day(self, pipeline_config):
        provider = ScriptedProvider({
            "warmup_selection": selection("wu0", "wu1", "wu2"),
            "workout_selection": selection("w0", "w1", "w2", "w3"),
            "cooldown_selection": {"selected_variations": []},
        })
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)

        with pytest.raises(SchemaViolation) as exc_info:
            await selectors.select_all(DAY, "Strength", pool())
        assert exc_info.value.node == "cooldown_selector"

    @pytest.mark.asyncio
    async def test_shared_entry_kept_in_earliest_phase_only(self, pipeline_config):
        # the same unpinned stretches are candidates for warmup and cooldown
        shared = candidates("m", ["mobility"])
        provider = ScriptedProvider({
            "warmup_selection": selection("m0", "m1", "m2"),
            "workout_selection": selection("w0", "w1", "w2", "w3"),
            "cooldown_selection": selection("m2", "m3", "m4", "m5"),
        })
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)
        shared_pool = ScoredPool(warmup=shared, workout=pool().workout, cooldown=shared)

        selections = await selectors.select_all(DAY, "Strength", shared_pool)

        assert [v.id for v in selections[Phase.WARMUP]] == ["m0", "m1", "m2"]
        assert [v.id for v in selections[Phase.COOLDOWN]] == ["m3", "m4", "m5"]
        session = assemble_session(DAY, PROFILE, selections)
        ids = session.variation_ids()
        assert len(ids) == len(set(ids))

    @pytest.mark.asyncio
    async def test_repeats_leaving_phase_short_fail_the_day(self, pipeline_config):
        shared = candidates("m", ["mobility"])
        provider = ScriptedProvider({
            "warmup_selection": selection("m0", "m1", "m2"),
            "workout_selection": selection("w0", "w1", "w2", "w3"),
            "cooldown_selection": selection("m0", "m1", "m3"),
        })
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)
        shared_pool = ScoredPool(warmup=shared, workout=pool().workout, cooldown=shared)

        with pytest.raises(SchemaViolation) as exc_info:
            await selectors.select_all(DAY, "Strength", shared_pool)

        assert exc_info.value.node == "cooldown_selector"
        assert exc_info.value.details["repeated_ids"] == ["m0", "m1"]


class TestAssembler:
    @pytest.mark.asyncio
    async def test_assembles_session(self, pipeline_config):
        provider = ScriptedProvider({
            "warmup_selection": selection("wu0", "wu1", "wu2"),
            "workout_selection": selection("w1", "w0", "w3", "w2"),
            "cooldown_selection": selection("cd0", "cd1", "cd2"),
        })
        selectors = PhaseSelectors(StructuredLLMClient(provider, timeout=1), pipeline_config)
        selections = await selectors.select_all(DAY, "Strength", pool())

        session = assemble_session(DAY, PROFILE, selections)

        assert session.day_index == 1
        assert session.date == DAY.date
        assert session.focus == DAY.focus
        # pilates (w1, w3) and strength (w0, w2) tie; first seen wins
        assert session.discipline == "pilates"
        assert session.variation_ids()[:3] == ["wu0", "wu1", "wu2"]

    def test_preferred_discipline_wins(self):
        profile = PROFILE.model_copy(update={"preferred_discipline": "yoga"})
        assert session_discipline(profile, []) == "yoga"

    def test_no_discipline_without_workout(self):
        assert session_discipline(PROFILE, []) is None
