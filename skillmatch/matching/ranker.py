"""Ranking of a candidate or job pool against an anchor entity."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import date
from typing import TypeVar

from skillmatch.matching.aggregator import WeightVector
from skillmatch.matching.learning import WeightProvider
from skillmatch.matching.models import (
    CandidateMatch,
    CandidateProfile,
    JobMatch,
    JobRequirement,
)
from skillmatch.matching.repository import (
    CandidateRepository,
    JobRepository,
    NotFoundError,
)
from skillmatch.matching.scorer import MatchScorer

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", CandidateMatch, JobMatch)


class MatchRanker:
    """Loads an anchor and its opposing pool, scores, sorts and truncates.

    Each pool member is scored in a worker thread. A member that fails to
    score is logged and left out; only a missing anchor fails the request.
    """

    def __init__(
        self,
        jobs: JobRepository,
        candidates: CandidateRepository,
        scorer: MatchScorer | None = None,
        provider: WeightProvider | None = None,
    ) -> None:
        self.jobs = jobs
        self.candidates = candidates
        self.scorer = scorer or MatchScorer()
        self.provider = provider or WeightProvider(self.scorer.config.weights)

    async def find_matching_candidates(
        self, job_id: str, limit: int, today: date | None = None
    ) -> list[CandidateMatch]:
        """Rank every candidate against a job, best first."""
        _check_limit(limit)

        job = await self.jobs.get_job_by_id(job_id)
        if job is None:
            raise NotFoundError("job", job_id)
        pool = await self.candidates.list_all_candidates()

        weights = self.provider.current
        today = today or date.today()

        def score_one(candidate: CandidateProfile) -> CandidateMatch:
            score, red_flags = self.scorer.score(candidate, job, weights, today)
            return CandidateMatch(candidate=candidate, score=score, red_flags=red_flags)

        matches = await self._score_pool(
            pool, score_one, lambda c: f"candidate {c.candidate_id}"
        )
        logger.debug(
            "Scored %d of %d candidates for job %s", len(matches), len(pool), job_id
        )
        return _rank(matches, limit)

    async def find_matching_jobs(
        self, candidate_id: str, limit: int, today: date | None = None
    ) -> list[JobMatch]:
        """Rank every job against a candidate, best first."""
        _check_limit(limit)

        candidate = await self.candidates.get_candidate_by_id(candidate_id)
        if candidate is None:
            raise NotFoundError("candidate", candidate_id)
        pool = await self.jobs.list_all_jobs()

        weights = self.provider.current
        today = today or date.today()

        def score_one(job: JobRequirement) -> JobMatch:
            score, red_flags = self.scorer.score(candidate, job, weights, today)
            return JobMatch(job=job, score=score, red_flags=red_flags)

        matches = await self._score_pool(pool, score_one, lambda j: f"job {j.job_id}")
        logger.debug(
            "Scored %d of %d jobs for candidate %s",
            len(matches),
            len(pool),
            candidate_id,
        )
        return _rank(matches, limit)

    async def _score_pool(
        self,
        pool: Sequence[T],
        score_one: Callable[[T], M],
        describe: Callable[[T], str],
    ) -> list[M]:
        def safe(member: T) -> M | None:
            try:
                return score_one(member)
            except Exception:
                logger.exception("Excluding %s from ranking", describe(member))
                return None

        results = await asyncio.gather(
            *(asyncio.to_thread(safe, member) for member in pool)
        )
        return [match for match in results if match is not None]

    @property
    def weights(self) -> WeightVector:
        return self.provider.current


def _check_limit(limit: int) -> None:
    if limit < 1:
        raise ValueError(f"limit must be at least 1 (got {limit})")


def _rank(matches: list[M], limit: int) -> list[M]:
    # sorted() is stable, so equal scores keep pool order.
    ranked = sorted(matches, key=lambda m: m.score.total_score, reverse=True)
    return ranked[:limit]
