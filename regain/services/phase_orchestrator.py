"""
Phase Orchestrator

Chooses, for one training day, the subset of catalog tags the session should
train. The selected tags drive both workout admission and candidate scoring.
"""
from __future__ import annotations

import logging

from regain.config.pipeline_config_loader import OrchestratorConfig
from regain.core.exceptions import SchemaViolation
from regain.llm.structured import StructuredLLMClient
from regain.prompts.phase_orchestrator import build_orchestrator_request
from regain.schemas.llm_outputs import TagSelectionOutput
from regain.schemas.plan import TrainingDayPlan

logger = logging.getLogger(__name__)

NODE_NAME = "phase_orchestrator"


class PhaseOrchestrator:
    def __init__(self, llm: StructuredLLMClient, config: OrchestratorConfig):
        self._llm = llm
        self._config = config

    def _bounds(self, available_tags: list[str]) -> tuple[int, int]:
        max_tags = min(self._config.max_tags, len(available_tags))
        min_tags = min(self._config.min_tags, max_tags)
        return min_tags, max_tags

    async def select_tags(
        self,
        day: TrainingDayPlan,
        goal_description: str,
        available_tags: list[str],
    ) -> frozenset[str]:
        """Return the tag set for ``day``.

        Raises:
            SchemaViolation: Empty selection, tags outside the catalog, or a
                count outside the configured bounds.
        """
        min_tags, max_tags = self._bounds(available_tags)
        request = build_orchestrator_request(day, goal_description, available_tags, min_tags, max_tags)
        output = await self._llm.call(NODE_NAME, request, TagSelectionOutput)

        known = set(available_tags)
        unknown = [t for t in output.target_tags if t not in known]
        if unknown:
            raise SchemaViolation(NODE_NAME, f"tags not present in the catalog: {unknown}", {"unknown_tags": unknown})
        if not min_tags <= len(output.target_tags) <= max_tags:
            raise SchemaViolation(
                NODE_NAME,
                f"selected {len(output.target_tags)} tags, expected {min_tags}-{max_tags}",
                {"target_tags": output.target_tags},
            )

        logger.info(f"[Phase Orchestrator] Day {day.index} ({day.purpose}): tags={output.target_tags}")
        return frozenset(output.target_tags)
