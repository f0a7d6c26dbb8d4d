"""Validated output shapes for the probabilistic pipeline nodes.

Each LLM response is parsed into one of these models immediately on receipt;
a ValidationError here is reported as a SchemaViolation by the caller.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ScheduledDayOutput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    day_index: int = Field(ge=0, le=6)
    focus: str = Field(min_length=1)
    description: str = Field(min_length=1)
    system_goal: str = Field(min_length=1)

    @field_validator("focus", "description", "system_goal")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class StrategyOutput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_training_days: int = Field(ge=1, le=7)
    training_days: list[int] = Field(min_length=1, max_length=7)
    goal_description: str = Field(min_length=1)
    schedule: list[ScheduledDayOutput]

    @model_validator(mode="after")
    def _consistent_week(self) -> "StrategyOutput":
        if self.total_training_days != len(self.training_days):
            raise ValueError(
                f"total_training_days ({self.total_training_days}) must equal "
                f"len(training_days) ({len(self.training_days)})"
            )
        if len(self.schedule) != self.total_training_days:
            raise ValueError(
                f"len(schedule) ({len(self.schedule)}) must equal "
                f"total_training_days ({self.total_training_days})"
            )
        if len(set(self.training_days)) != len(self.training_days):
            raise ValueError(f"training_days contains duplicates: {self.training_days}")
        invalid = [d for d in self.training_days if not 0 <= d <= 6]
        if invalid:
            raise ValueError(f"training_days contains invalid day indices: {invalid}")
        for i, (day, scheduled) in enumerate(zip(self.training_days, self.schedule)):
            if scheduled.day_index != day:
                raise ValueError(
                    f"schedule[{i}].day_index ({scheduled.day_index}) must match "
                    f"training_days[{i}] ({day})"
                )
        if not self.goal_description.strip():
            raise ValueError("goal_description must not be blank")
        return self


class TagSelectionOutput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    target_tags: list[str] = Field(min_length=1)

    @field_validator("target_tags")
    @classmethod
    def _normalize(cls, tags: list[str]) -> list[str]:
        normalized: list[str] = []
        for tag in tags:
            t = tag.strip().lower()
            if t and t not in normalized:
                normalized.append(t)
        return normalized


class SelectedVariationRef(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)


class PhaseSelectionOutput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    selected_variations: list[SelectedVariationRef] = Field(min_length=1)

    @property
    def ids(self) -> list[str]:
        return [ref.id for ref in self.selected_variations]
