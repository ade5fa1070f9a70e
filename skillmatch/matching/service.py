"""Matching service: the engine's public entry points."""

from __future__ import annotations

import logging
from datetime import date

from skillmatch.matching.aggregator import WeightVector
from skillmatch.matching.config import MatchingConfig, get_matching_config
from skillmatch.matching.learning import (
    Decision,
    LearningFeedback,
    Outcome,
    WeightProvider,
)
from skillmatch.matching.models import CandidateMatch, JobMatch, RedFlagSeverity
from skillmatch.matching.ranker import MatchRanker
from skillmatch.matching.repository import CandidateRepository, JobRepository
from skillmatch.matching.scorer import MatchScorer
from skillmatch.matching.weights_store import WeightStore

logger = logging.getLogger(__name__)


class MatchingService:
    """Ranks jobs and candidates and learns from hiring outcomes."""

    def __init__(
        self,
        jobs: JobRepository,
        candidates: CandidateRepository,
        config: MatchingConfig | None = None,
        store: WeightStore | None = None,
        provider: WeightProvider | None = None,
    ) -> None:
        self.config = config or get_matching_config()
        self.provider = provider or WeightProvider(self.config.weights)
        self.store = store
        self.ranker = MatchRanker(
            jobs, candidates, scorer=MatchScorer(self.config), provider=self.provider
        )
        self.learning = LearningFeedback(
            jobs, candidates, self.provider, store=store, config=self.config
        )

    async def load_weights(self) -> WeightVector:
        """Adopt the last persisted weight vector, if a store has one."""
        if self.store is not None:
            saved = await self.store.load_latest()
            if saved is not None:
                self.provider.swap(saved)
                logger.info("Loaded persisted weights %s", saved)
        return self.provider.current

    @property
    def weights(self) -> WeightVector:
        return self.ranker.weights

    async def find_matching_candidates(
        self, job_id: str, limit: int, today: date | None = None
    ) -> list[CandidateMatch]:
        """Best candidates for a job. Raises NotFoundError for an unknown job."""
        return await self.ranker.find_matching_candidates(job_id, limit, today)

    async def find_matching_jobs(
        self, candidate_id: str, limit: int, today: date | None = None
    ) -> list[JobMatch]:
        """Best jobs for a candidate. Raises NotFoundError for an unknown candidate."""
        return await self.ranker.find_matching_jobs(candidate_id, limit, today)

    async def update_learning_models(
        self,
        job_id: str,
        candidate_id: str,
        decision: Decision | str = Decision.HIRE,
        today: date | None = None,
    ) -> WeightVector | None:
        """Feed one hiring outcome back into the weights.

        Raises NotFoundError only for an unknown job; an unknown candidate
        leaves the weights unchanged and returns None.
        """
        outcome = Outcome(
            job_id=job_id, candidate_id=candidate_id, decision=Decision(decision)
        )
        return await self.learning.update(outcome, today)


def format_match(match: CandidateMatch | JobMatch) -> str:
    """Format a match for CLI output."""
    lines: list[str] = []
    if isinstance(match, CandidateMatch):
        name = match.candidate.name or match.candidate.candidate_id
        lines.append(f"Candidate: {name} ({match.candidate.candidate_id})")
    else:
        title = match.job.title or match.job.job_id
        lines.append(f"Job: {title} ({match.job.job_id})")

    score = match.score
    lines.append(f"Total score: {score.total_score:.2f}")
    lines.append(
        "Scores: "
        f"skill={score.skill.weighted_score:.2f} "
        f"experience={score.experience.weighted_score:.2f} "
        f"education={score.education.weighted_score:.2f}"
    )
    if score.skill.matched_skills:
        lines.append(f"Skills matched: {', '.join(score.skill.matched_skills)}")
    if score.skill.missing_skills:
        lines.append(f"Skills missing: {', '.join(score.skill.missing_skills)}")
    lines.append(
        f"Experience: {score.experience.total_years:.1f} of "
        f"{score.experience.required_years} required years"
    )
    if score.education.reasoning:
        lines.append(f"Education: {score.education.reasoning}")

    if match.red_flags.has_warnings:
        lines.append("Red flags:")
        for flag in match.red_flags.warnings:
            suffix = " (warning)" if flag.severity is RedFlagSeverity.WARNING else ""
            lines.append(f"  - {flag.detail}{suffix}")
    else:
        lines.append("Red flags: none")
    return "\n".join(lines)
