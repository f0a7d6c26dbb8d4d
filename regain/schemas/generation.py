"""API payloads for weekly generation."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from regain.schemas.plan import TrainingSession, WeeklyPlan


class WeeklyGenerationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    week_timestamp: int
    weekly_plan: WeeklyPlan
    sessions: list[TrainingSession]
    blacklisted_variation_ids: list[str]


class WeeklySessionRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    week_timestamp: int
    weekly_plan: dict
    final_sessions: list[dict]
    created_at: datetime | None = None
