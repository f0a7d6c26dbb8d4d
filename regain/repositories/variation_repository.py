from __future__ import annotations
from typing import Any

from sqlalchemy import select

from regain.models.variation import Variation
from regain.repositories.base import Repository


class VariationRepository(Repository):

    async def list_variations(self) -> list[dict[str, Any]]:
        """Read the whole variation catalog in catalog (insertion) order."""
        result = await self._session.execute(select(Variation).order_by(Variation.pk))
        return [
            {
                "id": v.id,
                "name": v.name,
                "disciplines": v.disciplines,
                "tags": v.tags,
                "phase": v.phase,
            }
            for v in result.scalars().all()
        ]

    async def create_many(self, entities: list[Variation]) -> list[Variation]:
        self._session.add_all(entities)
        await self._session.flush()
        return entities
