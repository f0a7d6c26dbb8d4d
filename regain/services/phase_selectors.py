"""
Phase Selectors

Three independent structured LLM calls (warmup, workout, cooldown), issued
together for one day and joined before assembly. Each call only sees its own
pruned candidate list; none shares state with the others.
"""
from __future__ import annotations

import asyncio
import logging

from regain.config.pipeline_config_loader import PipelineConfig, SelectionBounds
from regain.core.exceptions import SchemaViolation
from regain.llm.structured import StructuredLLMClient
from regain.prompts.selectors import build_selector_request
from regain.schemas.llm_outputs import PhaseSelectionOutput
from regain.schemas.plan import TrainingDayPlan
from regain.schemas.variation import Phase, ScoredPool, ScoredVariation, SelectedVariation

logger = logging.getLogger(__name__)


def node_name(phase: Phase) -> str:
    return f"{phase.value}_selector"


def distinct_disciplines(variations: list[SelectedVariation]) -> set[str]:
    return {d for v in variations for d in v.disciplines}


def resolve_selection(
    phase: Phase,
    selected_ids: list[str],
    candidates: list[ScoredVariation],
    bounds: SelectionBounds,
) -> list[SelectedVariation]:
    """Map the model's ids back to candidates and enforce the phase's rules.

    Raises:
        SchemaViolation: Duplicate or unknown ids, a count outside bounds, or
            too few distinct disciplines.
    """
    node = node_name(phase)
    by_id = {c.variation.id: c for c in candidates}

    duplicates = sorted({i for i in selected_ids if selected_ids.count(i) > 1})
    if duplicates:
        raise SchemaViolation(node, f"duplicate ids selected: {duplicates}", {"duplicate_ids": duplicates})

    unknown = [i for i in selected_ids if i not in by_id]
    if unknown:
        raise SchemaViolation(node, f"ids not in the candidate list: {unknown}", {"unknown_ids": unknown})

    if not bounds.contains(len(selected_ids)):
        raise SchemaViolation(
            node,
            f"selected {len(selected_ids)} variations, expected {bounds.min_items}-{bounds.max_items}",
            {"selected_count": len(selected_ids)},
        )

    selection = [SelectedVariation.from_scored(by_id[i]) for i in selected_ids]

    disciplines = distinct_disciplines(selection)
    if len(disciplines) < bounds.min_disciplines:
        raise SchemaViolation(
            node,
            f"selection spans {len(disciplines)} discipline(s), at least {bounds.min_disciplines} required",
            {"disciplines": sorted(disciplines)},
        )
    return selection


def drop_repeated(
    selections: dict[Phase, list[SelectedVariation]],
    config: PipelineConfig,
) -> dict[Phase, list[SelectedVariation]]:
    """Keep each id only in the earliest phase of the session that chose it.

    Raises:
        SchemaViolation: A phase left outside its bounds once repeats are removed.
    """
    taken: set[str] = set()
    result: dict[Phase, list[SelectedVariation]] = {}
    for phase in Phase:
        chosen = selections[phase]
        kept = [v for v in chosen if v.id not in taken]
        repeated = [v.id for v in chosen if v.id in taken]
        if repeated:
            bounds = config.phase(phase).selection
            node = node_name(phase)
            if not bounds.contains(len(kept)) or len(distinct_disciplines(kept)) < bounds.min_disciplines:
                raise SchemaViolation(
                    node,
                    f"ids already chosen by an earlier phase: {repeated}",
                    {"repeated_ids": repeated},
                )
            logger.info(f"[{node}] dropped ids chosen by an earlier phase: {repeated}")
        taken.update(v.id for v in kept)
        result[phase] = kept
    return result


class PhaseSelectors:
    def __init__(self, llm: StructuredLLMClient, config: PipelineConfig):
        self._llm = llm
        self._config = config

    async def select_phase(
        self,
        phase: Phase,
        day: TrainingDayPlan,
        goal_description: str,
        candidates: list[ScoredVariation],
    ) -> list[SelectedVariation]:
        bounds = self._config.phase(phase).selection
        request = build_selector_request(phase, day, goal_description, candidates, bounds)
        output = await self._llm.call(node_name(phase), request, PhaseSelectionOutput)
        selection = resolve_selection(phase, output.ids, candidates, bounds)
        logger.info(
            f"[{node_name(phase)}] Day {day.index}: selected {[v.name for v in selection]}"
        )
        return selection

    async def select_all(
        self,
        day: TrainingDayPlan,
        goal_description: str,
        pool: ScoredPool,
    ) -> dict[Phase, list[SelectedVariation]]:
        """Run the three selectors concurrently and wait for all of them.

        The first failure propagates; no partial selection is returned. An id
        chosen by more than one phase stays only in the earliest of them.
        """
        phases = list(Phase)
        results = await asyncio.gather(
            *(self.select_phase(p, day, goal_description, pool.for_phase(p)) for p in phases)
        )
        return drop_repeated(dict(zip(phases, results)), self._config)
