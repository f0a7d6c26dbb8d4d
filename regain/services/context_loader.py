"""
Context Loader / Cleaner

Reads the user's profile record and the variation catalog once per run and
projects both down to the fields the rest of the pipeline needs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from regain.core.exceptions import LoadFailure
from regain.repositories.profile_repository import ProfileRepository
from regain.repositories.variation_repository import VariationRepository
from regain.schemas.profile import UserMetrics, UserProfile
from regain.schemas.variation import Phase, Variation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedContext:
    profile: UserProfile
    variations: tuple[Variation, ...]
    initial_blacklist: frozenset[str]

    @property
    def available_tags(self) -> list[str]:
        return catalog_tags(self.variations)


def catalog_tags(variations) -> list[str]:
    """Distinct tags present across the catalog, sorted."""
    return sorted({tag for v in variations for tag in v.tags})


def _clamp_metric(value: Any) -> int:
    try:
        return max(0, min(100, int(value)))
    except (TypeError, ValueError):
        return 0


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _normalized_labels(value: Any) -> list[str]:
    labels: list[str] = []
    for item in _string_list(value):
        label = item.lower()
        if label not in labels:
            labels.append(label)
    return labels


def clean_profile(raw: dict[str, Any]) -> UserProfile:
    """Project a raw profile record to metrics, discomforts, objectives and discipline."""
    metrics_raw = raw.get("baseline_metrics")
    if not metrics_raw:
        metrics_raw = (raw.get("baseline_assessment") or {}).get("baseline_metrics")
    metrics_raw = metrics_raw or {}

    preferred = raw.get("preferred_discipline")
    if not preferred:
        disciplines = _string_list(raw.get("preferred_disciplines"))
        preferred = disciplines[0] if disciplines else None

    return UserProfile(
        metrics=UserMetrics(
            mobility=_clamp_metric(metrics_raw.get("mobility")),
            flexibility=_clamp_metric(metrics_raw.get("flexibility")),
            rotation=_clamp_metric(metrics_raw.get("rotation")),
        ),
        discomforts=_string_list(raw.get("discomforts")),
        objectives=_string_list(raw.get("objectives")),
        preferred_discipline=str(preferred).strip() if preferred else None,
    )


def clean_variation(raw: dict[str, Any]) -> Variation | None:
    """Keep id, name, disciplines, tags and a valid phase pin; drop entries without an id."""
    variation_id = raw.get("id")
    if not variation_id:
        return None

    phase = raw.get("phase")
    try:
        phase = Phase(phase) if phase else None
    except ValueError:
        phase = None

    return Variation(
        id=str(variation_id),
        name=str(raw.get("name") or ""),
        disciplines=_normalized_labels(raw.get("disciplines")),
        tags=_normalized_labels(raw.get("tags")),
        phase=phase,
    )


def clean_context(raw_profile: dict[str, Any], raw_variations: list[dict[str, Any]]) -> LoadedContext:
    profile = clean_profile(raw_profile)
    variations = tuple(v for v in (clean_variation(r) for r in raw_variations) if v is not None)

    if not variations:
        raise LoadFailure(
            "Variation catalog has no usable entries",
            details={"raw_count": len(raw_variations)},
        )

    blacklist = frozenset(str(i) for i in (raw_profile.get("blacklisted_variation_ids") or []))

    logger.info(
        f"[Context Cleaner] Variations: {len(raw_variations)} -> {len(variations)} "
        f"({len(raw_variations) - len(variations)} dropped for missing fields), "
        f"blacklisted ids: {len(blacklist)}"
    )
    return LoadedContext(profile=profile, variations=variations, initial_blacklist=blacklist)


async def load_context(session: AsyncSession, user_id: str) -> LoadedContext:
    """Read the profile and catalog for ``user_id`` and clean them.

    Raises:
        LoadFailure: Profile missing or unreadable, or catalog empty.
    """
    try:
        raw_profile = await ProfileRepository(session).get_profile(user_id)
        raw_variations = await VariationRepository(session).list_variations()
    except SQLAlchemyError as e:
        raise LoadFailure(
            f"Could not read generation context for user {user_id}: {e}",
            details={"user_id": user_id},
        ) from e

    if raw_profile is None:
        raise LoadFailure(
            f"User profile {user_id} not found",
            code="GEN_LOAD_002",
            details={"user_id": user_id},
        )
    if not raw_variations:
        raise LoadFailure("Variation catalog is empty", code="GEN_LOAD_003")

    logger.info(f"[Context Loader] Loaded profile for {user_id} and {len(raw_variations)} variations")
    return clean_context(raw_profile, raw_variations)
