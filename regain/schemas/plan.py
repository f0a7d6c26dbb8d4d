"""Weekly plan and training session schemas."""
import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from regain.schemas.variation import Phase, SelectedVariation


class TrainingDayPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    day_of_week: int = Field(ge=0, le=6)  # 0=Sunday ... 6=Saturday
    date: dt.date
    focus: str
    description: str
    system_goal: str

    @property
    def purpose(self) -> str:
        return f"{self.focus}: {self.description}"


class WeeklyPlan(BaseModel):
    """Permanent weekly structure produced once by the strategy planner."""

    model_config = ConfigDict(frozen=True)

    total_training_days: int = Field(ge=1, le=7)
    training_days: list[int]
    start_date: dt.date
    goal_description: str
    days: list[TrainingDayPlan]


class TrainingSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    day_index: int = Field(ge=0, le=6)
    date: dt.date
    focus: str
    description: str
    discipline: str | None = None
    warmup: list[SelectedVariation]
    workout: list[SelectedVariation]
    cooldown: list[SelectedVariation]

    def phase(self, phase: Phase) -> list[SelectedVariation]:
        return getattr(self, phase.value)

    def variation_ids(self) -> list[str]:
        return [v.id for p in Phase for v in self.phase(p)]
