from pydantic import BaseModel, ConfigDict, Field


class UserMetrics(BaseModel):
    """Baseline assessment scores, 0-100 (<40 poor, >80 excellent)."""

    model_config = ConfigDict(frozen=True)

    mobility: int = Field(default=0, ge=0, le=100)
    flexibility: int = Field(default=0, ge=0, le=100)
    rotation: int = Field(default=0, ge=0, le=100)


class UserProfile(BaseModel):
    """The four profile fields the generation pipeline reads."""

    model_config = ConfigDict(frozen=True)

    metrics: UserMetrics = Field(default_factory=UserMetrics)
    discomforts: list[str] = Field(default_factory=list)
    objectives: list[str] = Field(default_factory=list)
    preferred_discipline: str | None = None
