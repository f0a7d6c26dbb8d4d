"""Shared fixtures: a temporary SQLite database, a seeded catalog and a scripted LLM."""
import json
from datetime import date

import pytest
import pytest_asyncio

from regain.config.pipeline_config_loader import PipelineConfigLoader
from regain.config.settings import InvalidationPolicy, Settings
from regain.db.database import create_primary_engine, create_session_maker, init_db
from regain.llm.base import LLMConfig, LLMProvider, LLMResponse, Message
from regain.models import User, Variation
from regain.repositories.profile_repository import ProfileRepository
from regain.repositories.variation_repository import VariationRepository

# 2026-10-18 is a Sunday (day 0)
TODAY = date(2026, 10, 18)

SESSION_TAGS = ["strength", "legs", "push"]


def build_catalog(warmups: int = 14, workouts: int = 18, cooldowns: int = 14) -> list[dict]:
    """Phase-pinned catalog. Workout disciplines alternate strength / pilates."""
    catalog = []
    for i in range(1, warmups + 1):
        catalog.append({
            "id": f"wu{i}",
            "name": f"Warmup {i}",
            "disciplines": ["mobility"],
            "tags": ["mobility", "activation", "hips"],
            "phase": "warmup",
        })
    for i in range(1, workouts + 1):
        catalog.append({
            "id": f"w{i}",
            "name": f"Workout {i}",
            "disciplines": ["strength"] if i % 2 else ["pilates"],
            "tags": ["strength", "legs"] if i % 3 else ["strength", "push", "core"],
            "phase": "workout",
        })
    for i in range(1, cooldowns + 1):
        catalog.append({
            "id": f"cd{i}",
            "name": f"Cooldown {i}",
            "disciplines": ["yoga"],
            "tags": ["stretch", "flexibility"],
            "phase": "cooldown",
        })
    return catalog


def build_profile(user_id: str = "user-1", blacklist: list[str] | None = None, **overrides) -> dict:
    profile = {
        "id": user_id,
        "baseline_metrics": {"mobility": 35, "flexibility": 60, "rotation": 82},
        "discomforts": ["lower back"],
        "objectives": ["build strength", "improve hip mobility"],
        "preferred_discipline": None,
        "blacklisted_variation_ids": blacklist or [],
    }
    profile.update(overrides)
    return profile


def enum_of(schema: dict, *path: str) -> list[str]:
    node = schema
    for key in path:
        node = node[key]
    return list(node["enum"])


class FakeLLMProvider(LLMProvider):
    """Scripted provider that answers each pipeline node by its schema name.

    Selectors pick the first allowed ids (the schema enum lists candidates in
    rank order); the workout selector swaps in a second discipline when needed.
    ``overrides`` maps a schema name to a callable returning the raw payload.
    """

    def __init__(
        self,
        catalog: list[dict],
        training_days: list[int] | None = None,
        session_tags: list[str] | None = None,
        overrides: dict | None = None,
    ):
        self.disciplines = {v["id"]: v["disciplines"] for v in catalog}
        self.training_days = training_days or [1, 3, 5]
        self.session_tags = session_tags or SESSION_TAGS
        self.overrides = overrides or {}
        self.calls: list[str] = []
        self.selections: list[tuple[str, list[str]]] = []

    async def chat(self, messages: list[Message], config: LLMConfig) -> LLMResponse:
        self.calls.append(config.schema_name)
        if config.schema_name in self.overrides:
            data = self.overrides[config.schema_name](config)
        elif config.schema_name == "weekly_plan":
            data = self._plan()
        elif config.schema_name == "session_tags":
            data = self._tags(config.json_schema)
        else:
            data = self._selection(config)
        return LLMResponse(content=json.dumps(data), structured_data=data, model="fake")

    def _plan(self) -> dict:
        return {
            "total_training_days": len(self.training_days),
            "training_days": list(self.training_days),
            "goal_description": "Build full-body strength while restoring hip mobility",
            "schedule": [
                {
                    "day_index": d,
                    "focus": f"Strength day {i + 1}",
                    "description": "Compound lower and upper body strength",
                    "system_goal": "Progressive loading across the week",
                }
                for i, d in enumerate(self.training_days)
            ],
        }

    def _tags(self, schema: dict) -> dict:
        allowed = enum_of(schema, "properties", "target_tags", "items")
        chosen = [t for t in self.session_tags if t in allowed] or allowed[:3]
        return {"target_tags": chosen}

    def _selection(self, config: LLMConfig) -> dict:
        items = config.json_schema["properties"]["selected_variations"]
        allowed = enum_of(items, "items", "properties", "id")
        count = items["minItems"]
        chosen = allowed[:count]

        if config.schema_name == "workout_selection":
            spanned = {d for i in chosen for d in self.disciplines[i]}
            if len(spanned) < 2:
                other = next(
                    (i for i in allowed[count:] if set(self.disciplines[i]) - spanned),
                    None,
                )
                if other is not None:
                    chosen = chosen[:-1] + [other]

        self.selections.append((config.schema_name, chosen))
        return {"selected_variations": [{"id": i} for i in chosen]}


@pytest.fixture
def pipeline_config():
    return PipelineConfigLoader().config


@pytest.fixture
def test_settings():
    # multi-run scenarios assert on selection-order invalidation
    return Settings(
        llm_call_timeout=5.0,
        invalidation_policy=InvalidationPolicy.FIRST_HALF,
        invalidation_seed=7,
    )


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_primary_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(bind=engine)
    yield create_session_maker(engine)
    await engine.dispose()


async def seed(session_factory, profiles: list[dict], catalog: list[dict]) -> None:
    async with session_factory() as session:
        async with session.begin():
            for profile in profiles:
                await ProfileRepository(session).create(User(**profile))
            await VariationRepository(session).create_many([Variation(**v) for v in catalog])


@pytest_asyncio.fixture
async def seeded_db(session_factory):
    """Database with one user (three ids blacklisted) and the default catalog."""
    catalog = build_catalog()
    await seed(session_factory, [build_profile(blacklist=["wu1", "w1", "cd1"])], catalog)
    return session_factory, catalog
