"""
Filter Engine

Deterministic candidate generation for one training day.

Algorithm:
1. Hard filter: drop every variation whose id is excluded for this run
   (last week's blacklist plus ids invalidated earlier this week)
2. Hard filter: keep, per phase, only variations structurally compatible
   with that phase (admission tags, or an explicit phase pin)
3. Score each survivor by tag overlap with the day's selected tags
4. Stable sort by score descending, so ties keep catalog order

Same inputs always produce the same ordered pool.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from regain.config.pipeline_config_loader import PhaseConfig, PipelineConfig
from regain.schemas.variation import Phase, ScoredPool, ScoredVariation, Variation

logger = logging.getLogger(__name__)


def score_variation(variation: Variation, session_tags: frozenset[str]) -> int:
    """Number of the variation's tags that were selected for the day."""
    return len(set(variation.tags) & session_tags)


def is_phase_compatible(
    variation: Variation,
    phase_config: PhaseConfig,
    session_tags: frozenset[str],
) -> bool:
    if variation.phase is not None and variation.phase is not phase_config.phase:
        return False
    admitted = phase_config.admitted_for(session_tags)
    return any(tag in admitted for tag in variation.tags)


def exclude_ids(variations: Iterable[Variation], excluded: frozenset[str]) -> list[Variation]:
    return [v for v in variations if v.id not in excluded]


def rank_phase(
    candidates: list[Variation],
    phase_config: PhaseConfig,
    session_tags: frozenset[str],
) -> list[ScoredVariation]:
    scored = [
        ScoredVariation(variation=v, score=score_variation(v, session_tags))
        for v in candidates
        if is_phase_compatible(v, phase_config, session_tags)
    ]
    # sorted() is stable: equal scores keep catalog order
    return sorted(scored, key=lambda s: s.score, reverse=True)


def build_scored_pool(
    variations: Iterable[Variation],
    excluded: frozenset[str],
    session_tags: frozenset[str],
    config: PipelineConfig,
) -> ScoredPool:
    """Filter and score the catalog for every phase of one session."""
    candidates = exclude_ids(variations, excluded)
    pool = ScoredPool(
        **{
            phase.value: rank_phase(candidates, config.phase(phase), session_tags)
            for phase in Phase
        }
    )
    logger.info(
        f"[Filter Engine] {len(candidates)} candidates after exclusion of {len(excluded)} ids; "
        f"warmup={len(pool.warmup)}, workout={len(pool.workout)}, cooldown={len(pool.cooldown)}"
    )
    return pool
