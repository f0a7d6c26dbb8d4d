"""
Persistence Protocol

Runs once per generation, after the last session is assembled. The archive
record and the user's new exclusion list are written in one transaction:
either both land or neither does.
"""
from __future__ import annotations

import logging
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from regain.core.exceptions import DomainError, PersistenceFailure
from regain.core.transactions import transactional
from regain.models.session_record import WeeklySessionRecord
from regain.repositories.profile_repository import ProfileRepository
from regain.repositories.session_record_repository import SessionRecordRepository
from regain.services.run_state import RunState

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    return int(time.time() * 1000)


def build_record_payload(state: RunState) -> dict:
    return {
        "weekly_plan": state.weekly_plan.model_dump(mode="json"),
        "final_sessions": [s.model_dump(mode="json") for s in state.final_sessions],
    }


class PersistenceProtocol:
    """Writes a finished RunState through a session with no open transaction."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self.records = SessionRecordRepository(session)
        self.profiles = ProfileRepository(session)

    @transactional
    async def _write(self, state: RunState, week_timestamp: int) -> WeeklySessionRecord:
        record = await self.records.write_record(
            state.user_id,
            week_timestamp,
            build_record_payload(state),
        )
        # Full overwrite: last week's ids drop out of the window here
        await self.profiles.replace_blacklist(state.user_id, list(state.session_used_ids))
        return record

    async def persist(self, state: RunState, week_timestamp: int | None = None) -> WeeklySessionRecord:
        """Archive the run and replace the exclusion list.

        Raises:
            PersistenceFailure: Either write failed; nothing was committed.
        """
        if not state.is_done:
            raise PersistenceFailure(
                "Cannot persist a run that has not finished",
                details={"user_id": state.user_id, "current_day_index": state.current_day_index},
            )

        week_timestamp = week_timestamp if week_timestamp is not None else epoch_millis()
        try:
            record = await self._write(state, week_timestamp)
        except (SQLAlchemyError, DomainError) as e:
            logger.error(f"[Persistence] Rolled back weekly record for {state.user_id}: {e}")
            raise PersistenceFailure(
                f"Failed to persist weekly plan for user {state.user_id}: {e}",
                details={"user_id": state.user_id, "week_timestamp": week_timestamp},
            ) from e

        logger.info(
            f"[Persistence] Stored record {record.id} for {state.user_id} with "
            f"{len(state.final_sessions)} sessions; blacklist now {len(state.session_used_ids)} ids"
        )
        return record
