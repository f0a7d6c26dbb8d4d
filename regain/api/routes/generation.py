"""API routes for weekly plan generation."""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from regain.core.exceptions import ValidationError
from regain.db.database import async_session_maker, get_db
from regain.llm import get_llm_provider
from regain.repositories.session_record_repository import SessionRecordRepository
from regain.schemas.base import APIResponse
from regain.schemas.generation import WeeklyGenerationResult, WeeklySessionRecordResponse
from regain.services.weekly_generator import WeeklyGenerationService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_weekly_generation_service() -> WeeklyGenerationService:
    return WeeklyGenerationService(async_session_maker, get_llm_provider())


@router.post("/{user_id}/weekly-plans", response_model=APIResponse[WeeklyGenerationResult])
async def generate_weekly_plan(
    user_id: str,
    service: WeeklyGenerationService = Depends(get_weekly_generation_service),
):
    """
    Generate next week's training sessions for a user.

    Runs the full pipeline and stores the result. Generation failures are
    returned through the domain error envelope; nothing is stored in that case.
    """
    if not user_id.strip():
        raise ValidationError("user_id", "must not be blank")

    logger.info(f"Weekly plan generation requested for user {user_id}")
    result = await service.run(user_id)
    return APIResponse.ok(result)


@router.get("/{user_id}/weekly-plans", response_model=APIResponse[list[WeeklySessionRecordResponse]])
async def list_weekly_plans(
    user_id: str,
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List stored weekly records for a user, newest first."""
    records = await SessionRecordRepository(db).list_for_user(user_id, limit=limit)
    return APIResponse.ok([WeeklySessionRecordResponse.model_validate(r) for r in records])
