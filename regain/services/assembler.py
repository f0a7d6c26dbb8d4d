"""Assembler: merges the three phase selections into one TrainingSession."""
from __future__ import annotations

from collections import Counter

from regain.schemas.plan import TrainingDayPlan, TrainingSession
from regain.schemas.profile import UserProfile
from regain.schemas.variation import Phase, SelectedVariation


def session_discipline(profile: UserProfile, workout: list[SelectedVariation]) -> str | None:
    """The user's preferred discipline, else the most common workout discipline."""
    if profile.preferred_discipline:
        return profile.preferred_discipline
    counts = Counter(d for v in workout for d in v.disciplines)
    if not counts:
        return None
    # most_common keeps first-seen order among equal counts
    return counts.most_common(1)[0][0]


def assemble_session(
    day: TrainingDayPlan,
    profile: UserProfile,
    selections: dict[Phase, list[SelectedVariation]],
) -> TrainingSession:
    workout = selections[Phase.WORKOUT]
    return TrainingSession(
        day_index=day.day_of_week,
        date=day.date,
        focus=day.focus,
        description=day.description,
        discipline=session_discipline(profile, workout),
        warmup=list(selections[Phase.WARMUP]),
        workout=list(workout),
        cooldown=list(selections[Phase.COOLDOWN]),
    )
