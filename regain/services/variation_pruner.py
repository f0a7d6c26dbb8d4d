"""
Variation Pruner

Bounds the candidate list handed to each phase selector. Candidates below the
phase's score threshold are dropped and the list is capped; when too few
candidates clear the threshold the best-ranked ones are kept instead so the
selector still has a real choice.
"""

from __future__ import annotations

import logging

from regain.config.pipeline_config_loader import PhaseConfig, PipelineConfig
from regain.core.exceptions import EmptyCandidateSet, InsufficientCandidates
from regain.schemas.variation import Phase, ScoredPool, ScoredVariation

logger = logging.getLogger(__name__)


def prune_phase(ranked: list[ScoredVariation], phase_config: PhaseConfig) -> list[ScoredVariation]:
    """Prune one phase's ranked candidates (already sorted by score)."""
    if len(ranked) < phase_config.min_keep:
        return list(ranked)

    kept = [s for s in ranked if s.score >= phase_config.min_score][: phase_config.max_candidates]
    if len(kept) < phase_config.min_keep:
        return list(ranked[: phase_config.max_candidates])
    return kept


def prune_pool(pool: ScoredPool, config: PipelineConfig) -> ScoredPool:
    """Prune every phase and check each still has enough candidates to select from.

    Raises:
        EmptyCandidateSet: A phase has no candidates left.
        InsufficientCandidates: A phase has fewer candidates than its
            minimum selection size.
    """
    pruned: dict[str, list[ScoredVariation]] = {}
    for phase in Phase:
        phase_config = config.phase(phase)
        before = pool.for_phase(phase)
        kept = prune_phase(before, phase_config)
        logger.info(f"[Variation Pruner] {phase.value}: {len(before)} -> {len(kept)} candidates")

        if not kept:
            raise EmptyCandidateSet(phase.value)
        if len(kept) < phase_config.selection.min_items:
            raise InsufficientCandidates(phase.value, len(kept), phase_config.selection.min_items)
        pruned[phase.value] = kept

    return ScoredPool(**pruned)
