"""
Invalidator

After each session, a share of every phase's chosen variations is excluded
for the rest of the week. Which share is decided by InvalidationPolicy:

- first_half: the first ceil(n * ratio) in the order they were selected
- lowest_scored / highest_scored: by the score the variation was chosen with,
  ties broken by selection order
- random (default): a sample drawn from the invalidator's own random.Random (seedable)
"""
from __future__ import annotations

import logging
import math
import random

from regain.config.settings import InvalidationPolicy
from regain.schemas.plan import TrainingSession
from regain.schemas.variation import Phase, SelectedVariation

logger = logging.getLogger(__name__)


class Invalidator:
    def __init__(
        self,
        policy: InvalidationPolicy = InvalidationPolicy.RANDOM,
        ratio: float = 0.5,
        seed: int | None = None,
    ):
        if not 0 < ratio <= 1:
            raise ValueError(f"ratio ({ratio}) must be in (0, 1]")
        self.policy = policy
        self.ratio = ratio
        self._rng = random.Random(seed)

    def block_count(self, n: int) -> int:
        return math.ceil(n * self.ratio) if n else 0

    def pick(self, variations: list[SelectedVariation]) -> list[str]:
        """Ids of the variations to exclude from one phase."""
        count = self.block_count(len(variations))
        if count == 0:
            return []

        match self.policy:
            case InvalidationPolicy.FIRST_HALF:
                chosen = variations[:count]
            case InvalidationPolicy.LOWEST_SCORED:
                chosen = sorted(variations, key=lambda v: v.score)[:count]
            case InvalidationPolicy.HIGHEST_SCORED:
                chosen = sorted(variations, key=lambda v: v.score, reverse=True)[:count]
            case InvalidationPolicy.RANDOM:
                chosen = self._rng.sample(variations, count)
            case _:
                raise ValueError(f"Unknown invalidation policy: {self.policy}")
        return [v.id for v in chosen]

    def invalidate(self, session: TrainingSession) -> list[str]:
        """Ids to add to this week's exclusion accumulator for ``session``."""
        blocked: list[str] = []
        counts = {}
        for phase in Phase:
            ids = self.pick(session.phase(phase))
            counts[phase.value] = len(ids)
            blocked.extend(ids)
        logger.info(
            f"[Invalidator] Blocking {len(blocked)} variations for the rest of the week "
            f"(policy={self.policy.value}, {counts})"
        )
        return blocked
