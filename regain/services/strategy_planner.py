"""
Strategy Planner

One structured LLM call that produces the permanent WeeklyPlan: which days
the user trains, the focus and purpose of each day, and the overall system
rationale. Dates are computed afterwards from the training days.
"""
from __future__ import annotations

import logging
from datetime import date

from regain.llm.structured import StructuredLLMClient
from regain.prompts.strategy import build_strategy_request
from regain.schemas.llm_outputs import StrategyOutput
from regain.schemas.plan import TrainingDayPlan, WeeklyPlan
from regain.schemas.profile import UserProfile
from regain.services.scheduling import calculate_start_date, session_date

logger = logging.getLogger(__name__)

NODE_NAME = "strategy_planner"


def build_weekly_plan(output: StrategyOutput, today: date) -> WeeklyPlan:
    """Attach start and per-day dates to a validated strategy output."""
    start = calculate_start_date(output.training_days, today)
    days = [
        TrainingDayPlan(
            index=i,
            day_of_week=scheduled.day_index,
            date=session_date(start, scheduled.day_index),
            focus=scheduled.focus,
            description=scheduled.description,
            system_goal=scheduled.system_goal,
        )
        for i, scheduled in enumerate(output.schedule)
    ]
    return WeeklyPlan(
        total_training_days=output.total_training_days,
        training_days=list(output.training_days),
        start_date=start,
        goal_description=output.goal_description.strip(),
        days=days,
    )


class StrategyPlanner:
    def __init__(self, llm: StructuredLLMClient):
        self._llm = llm

    async def plan_week(self, profile: UserProfile, today: date) -> WeeklyPlan:
        """Generate the weekly plan for ``profile``.

        Raises:
            SchemaViolation: The model's plan is malformed or inconsistent.
            LLMCallError: The call timed out or failed in transport.
        """
        logger.info(
            f"[Strategy Planner] Generating weekly plan: "
            f"{len(profile.discomforts)} discomforts, {len(profile.objectives)} objectives"
        )
        output = await self._llm.call(NODE_NAME, build_strategy_request(profile), StrategyOutput)
        plan = build_weekly_plan(output, today)
        logger.info(
            f"[Strategy Planner] Weekly plan: {plan.total_training_days} days "
            f"{plan.training_days}, starting {plan.start_date.isoformat()}"
        )
        return plan
