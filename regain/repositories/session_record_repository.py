from __future__ import annotations
from typing import Any

from sqlalchemy import select

from regain.models.session_record import WeeklySessionRecord
from regain.repositories.base import Repository


class SessionRecordRepository(Repository):
    """Append-only access to archived weekly generation runs."""

    async def write_record(
        self,
        user_id: str,
        week_timestamp: int,
        payload: dict[str, Any],
    ) -> WeeklySessionRecord:
        record = WeeklySessionRecord(
            user_id=user_id,
            week_timestamp=week_timestamp,
            weekly_plan=payload["weekly_plan"],
            final_sessions=payload["final_sessions"],
        )
        self._session.add(record)
        await self._session.flush()
        return record

    async def list_for_user(self, user_id: str, limit: int = 20) -> list[WeeklySessionRecord]:
        result = await self._session.execute(
            select(WeeklySessionRecord)
            .where(WeeklySessionRecord.user_id == user_id)
            .order_by(WeeklySessionRecord.week_timestamp.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
