"""Outcome-driven adjustment of the weight vector."""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from skillmatch.matching.aggregator import WeightVector
from skillmatch.matching.config import MatchingConfig, get_matching_config
from skillmatch.matching.matchers import (
    EducationMatcher,
    ExperienceMatcher,
    SkillMatcher,
)
from skillmatch.matching.models import CandidateProfile, JobRequirement
from skillmatch.matching.repository import (
    CandidateRepository,
    JobRepository,
    NotFoundError,
)
from skillmatch.matching.weights_store import WeightStore

logger = logging.getLogger(__name__)


class WeightProvider:
    """Holds the live weight vector shared by ranking requests.

    Readers always get a complete vector; writers replace it whole under a
    lock, so an update never interleaves with another update.
    """

    def __init__(self, initial: WeightVector | None = None) -> None:
        self._weights = initial or WeightVector()
        self._lock = threading.Lock()

    @property
    def current(self) -> WeightVector:
        with self._lock:
            return self._weights

    def swap(self, weights: WeightVector) -> None:
        with self._lock:
            self._weights = weights

    def update(self, fn: Callable[[WeightVector], WeightVector]) -> WeightVector:
        """Atomically replace the vector with ``fn(current)``."""
        with self._lock:
            self._weights = fn(self._weights)
            return self._weights


class Decision(str, Enum):
    """Employer decision on a candidate for a job."""

    HIRE = "hire"
    REJECT = "reject"


@dataclass(frozen=True)
class Outcome:
    """An observed hiring decision."""

    job_id: str
    candidate_id: str
    decision: Decision = Decision.HIRE


class LearningFeedback:
    """Nudges the weight vector toward components that predict hires."""

    def __init__(
        self,
        jobs: JobRepository,
        candidates: CandidateRepository,
        provider: WeightProvider,
        store: WeightStore | None = None,
        config: MatchingConfig | None = None,
    ) -> None:
        self.jobs = jobs
        self.candidates = candidates
        self.provider = provider
        self.store = store
        self.config = config or get_matching_config()
        self._skill_matcher = SkillMatcher(self.config)
        self._experience_matcher = ExperienceMatcher()
        self._education_matcher = EducationMatcher(self.config)

    async def update(
        self, outcome: Outcome, today: date | None = None
    ) -> WeightVector | None:
        """Apply one outcome to the shared weights.

        Returns:
            The new weight vector, or None when the candidate could not be
            resolved and nothing changed.

        Raises:
            NotFoundError: If the job does not exist.
        """
        job = await self.jobs.get_job_by_id(outcome.job_id)
        if job is None:
            raise NotFoundError("job", outcome.job_id)

        profile = await self._assemble_profile(outcome.candidate_id)
        if profile is None:
            logger.warning(
                "Skipping weight update for job %s: candidate %s not found",
                outcome.job_id,
                outcome.candidate_id,
            )
            return None

        components = self._component_scores(profile, job, today or date.today())
        direction = 1.0 if outcome.decision == Decision.HIRE else -1.0
        weights = self.provider.update(
            lambda current: self.nudge(current, components, direction)
        )
        logger.info(
            "Weights updated after %s of candidate %s for job %s: %s",
            outcome.decision.value,
            outcome.candidate_id,
            outcome.job_id,
            weights,
        )

        if self.store is not None:
            try:
                await self.store.save(
                    weights,
                    reason=f"{outcome.decision.value}:{outcome.job_id}:{outcome.candidate_id}",
                )
            except (sqlite3.Error, OSError) as exc:
                logger.warning("Could not persist weight vector: %s", exc)

        return weights

    def nudge(
        self,
        weights: WeightVector,
        components: tuple[float, float, float],
        direction: float,
    ) -> WeightVector:
        """Move each weight by its component's distance from the mean."""
        mean = sum(components) / len(components)
        rate = self.config.learning_rate
        floor = self.config.learning_min_weight
        adjusted = [
            max(floor, weight + direction * rate * (component - mean))
            for weight, component in zip(weights.as_tuple(), components)
        ]
        return WeightVector.normalized(*adjusted)

    async def _assemble_profile(self, candidate_id: str) -> CandidateProfile | None:
        candidate = await self.candidates.get_candidate_by_id(candidate_id)
        if candidate is None:
            return None
        return candidate.model_copy(
            update={
                "skills": await self.candidates.get_skills(candidate_id),
                "experience": await self.candidates.get_experience(candidate_id),
                "education": await self.candidates.get_education(candidate_id),
            }
        )

    def _component_scores(
        self, profile: CandidateProfile, job: JobRequirement, today: date
    ) -> tuple[float, float, float]:
        return (
            self._skill_matcher.score(profile.skills, job).weighted_score,
            self._experience_matcher.score(profile.experience, job, today).weighted_score,
            self._education_matcher.score(profile.education, job).weighted_score,
        )
