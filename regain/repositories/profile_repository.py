from __future__ import annotations
from datetime import datetime
from typing import Any

from sqlalchemy import update

from regain.core.exceptions import NotFoundError
from regain.models.user import User
from regain.repositories.base import Repository


class ProfileRepository(Repository):

    async def get_profile(self, user_id: str) -> dict[str, Any] | None:
        """Read the raw profile record consumed by the generation pipeline.

        Returns:
            Dict with baseline_metrics, discomforts, objectives,
            preferred_discipline and blacklisted_variation_ids, or None when
            the user does not exist.
        """
        user = await self._session.get(User, user_id)
        if user is None:
            return None
        return {
            "uid": user.id,
            "baseline_metrics": user.baseline_metrics,
            "discomforts": user.discomforts,
            "objectives": user.objectives,
            "preferred_discipline": user.preferred_discipline,
            "blacklisted_variation_ids": user.blacklisted_variation_ids,
        }

    async def replace_blacklist(self, user_id: str, variation_ids: list[str]) -> None:
        """Overwrite (never merge) the user's rolling exclusion list."""
        result = await self._session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                blacklisted_variation_ids=list(variation_ids),
                updated_at=datetime.utcnow(),
            )
        )
        if result.rowcount == 0:
            raise NotFoundError("user", f"User {user_id} not found", {"user_id": user_id})

    async def create(self, entity: User) -> User:
        self._session.add(entity)
        await self._session.flush()
        return entity
