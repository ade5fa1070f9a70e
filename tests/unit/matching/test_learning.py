"""Tests for LearningFeedback and WeightProvider."""

from __future__ import annotations

import sqlite3
from datetime import date

import pytest


@pytest.fixture
def repo(backend_job, make_candidate):
    from skillmatch.matching.repository import InMemoryRepository

    strong = make_candidate(
        "strong",
        skills={"Java": 9, "Spring": 8, "Hibernate": 7},
        experience=[(date(2016, 1, 1), None)],
        degrees=["BSc Computer Science"],
    )
    return InMemoryRepository(jobs=[backend_job], candidates=[strong])


class TestWeightProvider:
    """Test WeightProvider."""

    def test_starts_with_default_weights(self):
        """A new provider should hold the default vector."""
        from skillmatch.matching.aggregator import WeightVector
        from skillmatch.matching.learning import WeightProvider

        assert WeightProvider().current == WeightVector()

    def test_swap_replaces_vector(self):
        """swap should replace the whole vector."""
        from skillmatch.matching.aggregator import WeightVector
        from skillmatch.matching.learning import WeightProvider

        provider = WeightProvider()
        provider.swap(WeightVector(0.4, 0.4, 0.2))

        assert provider.current == WeightVector(0.4, 0.4, 0.2)

    def test_update_applies_function(self):
        """update should store and return fn(current)."""
        from skillmatch.matching.aggregator import WeightVector
        from skillmatch.matching.learning import WeightProvider

        provider = WeightProvider(WeightVector(0.5, 0.3, 0.2))
        result = provider.update(lambda w: WeightVector(w.education, w.experience, w.skill))

        assert result == WeightVector(0.2, 0.3, 0.5)
        assert provider.current == result


class TestLearningFeedback:
    """Test LearningFeedback.update."""

    @pytest.mark.asyncio
    async def test_hire_shifts_weight_toward_strong_components(
        self, repo, matching_config, today
    ):
        """Components above the candidate's mean gain weight on a hire."""
        from skillmatch.matching.learning import (
            LearningFeedback,
            Outcome,
            WeightProvider,
        )

        provider = WeightProvider(matching_config.weights)
        feedback = LearningFeedback(repo, repo, provider, config=matching_config)

        weights = await feedback.update(Outcome("job-backend", "strong"), today)

        # Components are skill 0.8, experience 1.0, education 0.6 (mean 0.8).
        assert weights is not None
        assert weights.as_tuple() == pytest.approx((0.5, 0.31, 0.19))
        assert provider.current == weights

    @pytest.mark.asyncio
    async def test_reject_shifts_weight_the_other_way(
        self, repo, matching_config, today
    ):
        """A rejection moves weight away from the candidate's strong components."""
        from skillmatch.matching.learning import (
            Decision,
            LearningFeedback,
            Outcome,
            WeightProvider,
        )

        provider = WeightProvider(matching_config.weights)
        feedback = LearningFeedback(repo, repo, provider, config=matching_config)

        weights = await feedback.update(
            Outcome("job-backend", "strong", Decision.REJECT), today
        )

        assert weights is not None
        assert weights.as_tuple() == pytest.approx((0.5, 0.29, 0.21))

    @pytest.mark.asyncio
    async def test_weights_stay_normalized_and_floored(self, repo, today):
        """Repeated updates keep the vector summing to 1.0 above the floor."""
        from skillmatch.matching.aggregator import WeightVector
        from skillmatch.matching.config import MatchingConfig
        from skillmatch.matching.learning import (
            LearningFeedback,
            Outcome,
            WeightProvider,
        )

        config = MatchingConfig(_env_file=None, learning_rate=1.0)  # type: ignore[call-arg]
        provider = WeightProvider(WeightVector(0.5, 0.45, 0.05))
        feedback = LearningFeedback(repo, repo, provider, config=config)

        for _ in range(5):
            weights = await feedback.update(Outcome("job-backend", "strong"), today)

        assert weights is not None
        assert sum(weights.as_tuple()) == pytest.approx(1.0)
        assert min(weights.as_tuple()) > 0.0

    @pytest.mark.asyncio
    async def test_unknown_job_raises_not_found(self, repo, matching_config):
        """An unknown job should raise NotFoundError."""
        from skillmatch.matching.learning import (
            LearningFeedback,
            Outcome,
            WeightProvider,
        )
        from skillmatch.matching.repository import NotFoundError

        feedback = LearningFeedback(repo, repo, WeightProvider(), config=matching_config)

        with pytest.raises(NotFoundError):
            await feedback.update(Outcome("missing", "strong"))

    @pytest.mark.asyncio
    async def test_unknown_candidate_is_a_no_op(self, repo, matching_config, caplog):
        """An unknown candidate should leave the weights unchanged and log a warning."""
        from skillmatch.matching.learning import (
            LearningFeedback,
            Outcome,
            WeightProvider,
        )

        provider = WeightProvider(matching_config.weights)
        feedback = LearningFeedback(repo, repo, provider, config=matching_config)

        with caplog.at_level("WARNING"):
            result = await feedback.update(Outcome("job-backend", "ghost"))

        assert result is None
        assert provider.current == matching_config.weights
        assert "ghost" in caplog.text

    @pytest.mark.asyncio
    async def test_profile_is_assembled_from_repository_lists(
        self, backend_job, matching_config, today
    ):
        """Skills, experience and education come from the per-list lookups."""
        from skillmatch.matching.learning import (
            LearningFeedback,
            Outcome,
            WeightProvider,
        )
        from skillmatch.matching.models import CandidateProfile, SkillClaim
        from skillmatch.matching.repository import InMemoryRepository

        class SplitRepository(InMemoryRepository):
            async def get_skills(self, candidate_id):
                return [SkillClaim(name="Java", proficiency_level=10)]

        repo = SplitRepository(
            jobs=[backend_job], candidates=[CandidateProfile(candidate_id="bare")]
        )
        provider = WeightProvider(matching_config.weights)
        feedback = LearningFeedback(repo, repo, provider, config=matching_config)

        weights = await feedback.update(Outcome("job-backend", "bare"), today)

        # Skill 1/3 is the only non-zero component, so skill weight grows.
        assert weights is not None
        assert weights.skill > matching_config.weights.skill

    @pytest.mark.asyncio
    async def test_persistence_failure_is_not_raised(
        self, repo, matching_config, today, caplog
    ):
        """A failing store should be logged, not raised."""
        from skillmatch.matching.learning import (
            LearningFeedback,
            Outcome,
            WeightProvider,
        )

        class BrokenStore:
            async def save(self, weights, reason=None):
                raise sqlite3.OperationalError("database is locked")

        feedback = LearningFeedback(
            repo, repo, WeightProvider(), store=BrokenStore(), config=matching_config
        )

        with caplog.at_level("WARNING"):
            weights = await feedback.update(Outcome("job-backend", "strong"), today)

        assert weights is not None
        assert "database is locked" in caplog.text

    @pytest.mark.asyncio
    async def test_update_is_persisted(self, repo, matching_config, today, tmp_path):
        """The new vector should be saved to the store."""
        from skillmatch.matching.learning import (
            LearningFeedback,
            Outcome,
            WeightProvider,
        )
        from skillmatch.matching.weights_store import WeightStore

        store = WeightStore(tmp_path / "weights.db")
        await store.initialize()
        try:
            feedback = LearningFeedback(
                repo, repo, WeightProvider(), store=store, config=matching_config
            )
            weights = await feedback.update(Outcome("job-backend", "strong"), today)
            saved = await store.load_latest()
        finally:
            await store.close()

        assert weights is not None
        assert saved is not None
        assert saved.as_tuple() == pytest.approx(weights.as_tuple())
