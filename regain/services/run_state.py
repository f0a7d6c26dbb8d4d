"""
Run State

The single value threaded through one weekly generation run. Every stage
returns a new RunState instead of mutating the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from regain.schemas.plan import TrainingDayPlan, TrainingSession, WeeklyPlan
from regain.schemas.profile import UserProfile
from regain.schemas.variation import Variation


class LoopPhase(str, Enum):
    ITERATING = "iterating"
    DONE = "done"


@dataclass(frozen=True)
class RunState:
    """State of one generation run.

    ``initial_blacklist`` is read once from the user record and never changes.
    ``session_used_ids`` only ever grows; it keeps first-seen order and holds
    each id once.
    """

    user_id: str
    profile: UserProfile
    variations: tuple[Variation, ...]
    weekly_plan: WeeklyPlan
    initial_blacklist: frozenset[str]
    session_used_ids: tuple[str, ...] = ()
    final_sessions: tuple[TrainingSession, ...] = ()
    current_day_index: int = 0

    @property
    def phase(self) -> LoopPhase:
        if self.current_day_index < len(self.weekly_plan.days):
            return LoopPhase.ITERATING
        return LoopPhase.DONE

    @property
    def is_done(self) -> bool:
        return self.phase is LoopPhase.DONE

    @property
    def current_day(self) -> TrainingDayPlan:
        return self.weekly_plan.days[self.current_day_index]

    @property
    def excluded_ids(self) -> frozenset[str]:
        return self.initial_blacklist | frozenset(self.session_used_ids)

    def with_session(self, session: TrainingSession) -> RunState:
        return replace(self, final_sessions=self.final_sessions + (session,))

    def with_used_ids(self, ids: list[str]) -> RunState:
        merged = list(self.session_used_ids)
        seen = set(merged)
        for variation_id in ids:
            if variation_id not in seen:
                seen.add(variation_id)
                merged.append(variation_id)
        return replace(self, session_used_ids=tuple(merged))

    def advance(self) -> RunState:
        return replace(self, current_day_index=self.current_day_index + 1)
