"""Catalog variation schemas."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    WARMUP = "warmup"
    WORKOUT = "workout"
    COOLDOWN = "cooldown"


class Variation(BaseModel):
    """A performable exercise entry from the catalog (cleaned projection)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    disciplines: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    # Explicit phase pin carried by some catalog entries; None means tag-derived eligibility
    phase: Phase | None = None


class ScoredVariation(BaseModel):
    """A candidate and its tag-overlap score for the current day."""

    model_config = ConfigDict(frozen=True)

    variation: Variation
    score: int = Field(ge=0)


class SelectedVariation(Variation):
    """A variation chosen for a session phase, with the score it had when chosen."""

    score: int = Field(default=0, ge=0)

    @classmethod
    def from_scored(cls, scored: ScoredVariation) -> "SelectedVariation":
        return cls(**scored.variation.model_dump(), score=scored.score)


class ScoredPool(BaseModel):
    """Per-phase candidate lists, ordered by descending score then catalog order."""

    model_config = ConfigDict(frozen=True)

    warmup: list[ScoredVariation] = Field(default_factory=list)
    workout: list[ScoredVariation] = Field(default_factory=list)
    cooldown: list[ScoredVariation] = Field(default_factory=list)

    def for_phase(self, phase: Phase) -> list[ScoredVariation]:
        return getattr(self, phase.value)
