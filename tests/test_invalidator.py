"""Tests for the rolling exclusion window policies."""
from datetime import date

import pytest

from regain.config.settings import InvalidationPolicy
from regain.schemas.plan import TrainingSession
from regain.schemas.variation import Phase, SelectedVariation
from regain.services.invalidator import Invalidator


def selected(prefix, scores):
    return [SelectedVariation(id=f"{prefix}{i}", score=s) for i, s in enumerate(scores)]


@pytest.fixture
def session():
    return TrainingSession(
        day_index=1,
        date=date(2026, 10, 19),
        focus="Legs",
        description="Lower body strength",
        warmup=selected("wu", [0, 2, 1]),
        workout=selected("w", [1, 3, 3, 2, 0]),
        cooldown=selected("cd", [1, 1, 2, 0]),
    )


class TestInvalidationCount:
    @pytest.mark.parametrize("n,expected", [(0, 0), (1, 1), (3, 2), (4, 2), (5, 3), (6, 3)])
    def test_half_rounded_up(self, n, expected):
        assert Invalidator().block_count(n) == expected

    def test_ratio_must_be_positive(self):
        with pytest.raises(ValueError):
            Invalidator(ratio=0)


class TestPolicies:
    def test_first_half_uses_selection_order(self, session):
        blocked = Invalidator(InvalidationPolicy.FIRST_HALF).invalidate(session)
        assert blocked == ["wu0", "wu1", "w0", "w1", "w2", "cd0", "cd1"]

    def test_lowest_scored(self, session):
        blocked = Invalidator(InvalidationPolicy.LOWEST_SCORED).invalidate(session)
        # ties keep selection order
        assert blocked == ["wu0", "wu2", "w4", "w0", "w3", "cd3", "cd0"]

    def test_highest_scored(self, session):
        blocked = Invalidator(InvalidationPolicy.HIGHEST_SCORED).invalidate(session)
        assert blocked == ["wu1", "wu2", "w1", "w2", "w3", "cd2", "cd0"]

    def test_random_is_reproducible_with_seed(self, session):
        first = Invalidator(InvalidationPolicy.RANDOM, seed=42).invalidate(session)
        second = Invalidator(InvalidationPolicy.RANDOM, seed=42).invalidate(session)
        assert first == second
        assert len(first) == 7
        assert set(first) <= set(session.variation_ids())

    def test_wider_ratio(self, session):
        blocked = Invalidator(InvalidationPolicy.FIRST_HALF, ratio=1.0).invalidate(session)
        assert blocked == session.variation_ids()

    def test_random_is_the_default(self, session):
        invalidator = Invalidator(seed=3)
        assert invalidator.policy is InvalidationPolicy.RANDOM
        blocked = invalidator.invalidate(session)
        assert sorted(blocked) == sorted(Invalidator(InvalidationPolicy.RANDOM, seed=3).invalidate(session))
        for phase in Phase:
            chosen = {v.id for v in session.phase(phase)}
            assert len(chosen & set(blocked)) == Invalidator().block_count(len(chosen))
