"""
Weekly Generation Service

Drives one weekly generation run:

1. Load and clean the user's profile and the variation catalog
2. Ask the strategy planner for the permanent WeeklyPlan
3. Fold ``step`` over the plan's days. Each step selects tags, filters and
   prunes the catalog, runs the three phase selectors concurrently, assembles
   the session and invalidates part of it for the rest of the week
4. Persist the archive record and the new exclusion list together

Any failure before step 4 aborts the run with nothing written.
"""
from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from regain.config.pipeline_config_loader import PipelineConfig, get_pipeline_config
from regain.config.settings import Settings, get_settings
from regain.core.exceptions import GenerationError
from regain.core.logging import add_log_context, clear_log_context, get_logger
from regain.llm.base import LLMProvider
from regain.llm.structured import StructuredLLMClient
from regain.schemas.generation import WeeklyGenerationResult
from regain.services.assembler import assemble_session
from regain.services.context_loader import catalog_tags, load_context
from regain.services.filter_engine import build_scored_pool
from regain.services.invalidator import Invalidator
from regain.services.persistence import PersistenceProtocol
from regain.services.phase_orchestrator import PhaseOrchestrator
from regain.services.phase_selectors import PhaseSelectors
from regain.services.run_state import LoopPhase, RunState
from regain.services.strategy_planner import StrategyPlanner
from regain.services.variation_pruner import prune_pool

logger = get_logger(__name__)


class WeeklyGenerationService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        provider: LLMProvider,
        settings: Settings | None = None,
        pipeline_config: PipelineConfig | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.settings = settings or get_settings()
        self.config = pipeline_config or get_pipeline_config()
        self._session_factory = session_factory
        self._today = today

        llm = StructuredLLMClient(provider, timeout=self.settings.llm_call_timeout)
        self.strategy = StrategyPlanner(llm)
        self.orchestrator = PhaseOrchestrator(llm, self.config.orchestrator)
        self.selectors = PhaseSelectors(llm, self.config)
        self.invalidator = Invalidator(
            policy=self.settings.invalidation_policy,
            ratio=self.settings.invalidation_ratio,
            seed=self.settings.invalidation_seed,
        )

    async def start(self, user_id: str) -> RunState:
        """Load context and plan the week; returns the state before day 0."""
        async with self._session_factory() as session:
            context = await load_context(session, user_id)

        weekly_plan = await self.strategy.plan_week(context.profile, self._today())
        return RunState(
            user_id=user_id,
            profile=context.profile,
            variations=context.variations,
            weekly_plan=weekly_plan,
            initial_blacklist=context.initial_blacklist,
        )

    async def step(self, state: RunState) -> RunState:
        """Generate the session for the current day and move to the next one.

        A finished state is returned unchanged.
        """
        if state.phase is LoopPhase.DONE:
            return state

        day = state.current_day
        goal = state.weekly_plan.goal_description
        available_tags = catalog_tags(state.variations)

        session_tags = await self.orchestrator.select_tags(day, goal, available_tags)
        pool = build_scored_pool(state.variations, state.excluded_ids, session_tags, self.config)
        pool = prune_pool(pool, self.config)
        selections = await self.selectors.select_all(day, goal, pool)

        session = assemble_session(day, state.profile, selections)
        blocked = self.invalidator.invalidate(session)

        logger.info(
            "session_assembled",
            day_index=day.index,
            day_of_week=day.day_of_week,
            focus=day.focus,
            variations=len(session.variation_ids()),
            newly_blocked=len(blocked),
        )
        return state.with_session(session).with_used_ids(blocked).advance()

    async def run(self, user_id: str) -> WeeklyGenerationResult:
        """Run the whole pipeline for ``user_id`` and persist the result.

        Raises:
            GenerationError: Any typed pipeline failure; nothing is persisted
                unless the run reached the end of the week.
        """
        add_log_context(user_id=user_id, run_id=uuid.uuid4().hex)
        try:
            state = await self.start(user_id)
            logger.info(
                "weekly_plan_ready",
                training_days=state.weekly_plan.training_days,
                start_date=state.weekly_plan.start_date.isoformat(),
                excluded_at_start=len(state.initial_blacklist),
            )

            while not state.is_done:
                state = await self.step(state)

            async with self._session_factory() as session:
                record = await PersistenceProtocol(session).persist(state)

            logger.info(
                "weekly_generation_completed",
                sessions=len(state.final_sessions),
                blacklisted=len(state.session_used_ids),
                record_id=record.id,
            )
            return WeeklyGenerationResult(
                user_id=user_id,
                week_timestamp=record.week_timestamp,
                weekly_plan=state.weekly_plan,
                sessions=list(state.final_sessions),
                blacklisted_variation_ids=list(state.session_used_ids),
            )
        except GenerationError as e:
            logger.warning("weekly_generation_failed", error_code=e.code, error=e.message)
            raise
        finally:
            clear_log_context()
