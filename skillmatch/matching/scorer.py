"""Scores a single candidate/job pair."""

from __future__ import annotations

from datetime import date

from skillmatch.matching.aggregator import ScoreAggregator, WeightVector
from skillmatch.matching.config import MatchingConfig, get_matching_config
from skillmatch.matching.matchers import (
    EducationMatcher,
    ExperienceMatcher,
    SkillMatcher,
)
from skillmatch.matching.models import (
    CandidateProfile,
    CompositeScore,
    JobRequirement,
    RedFlagDetection,
)
from skillmatch.matching.redflags import RedFlagDetector


class MatchScorer:
    """Runs every component scorer plus the red-flag detector for one pair.

    Scoring is pure: the same candidate, job, weights and ``today`` always
    produce the same result, and neither entity is modified.
    """

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()
        self.skill_matcher = SkillMatcher(self.config)
        self.experience_matcher = ExperienceMatcher()
        self.education_matcher = EducationMatcher(self.config)
        self.red_flag_detector = RedFlagDetector(self.config)
        self.aggregator = ScoreAggregator(self.config.weights)

    def score(
        self,
        candidate: CandidateProfile,
        job: JobRequirement,
        weights: WeightVector | None = None,
        today: date | None = None,
    ) -> tuple[CompositeScore, RedFlagDetection]:
        """Return the composite score and red flags for a candidate/job pair."""
        today = today or date.today()

        skill = self.skill_matcher.score(candidate.skills, job)
        experience = self.experience_matcher.score(candidate.experience, job, today)
        education = self.education_matcher.score(candidate.education, job)
        red_flags = self.red_flag_detector.detect(
            candidate.experience, candidate.skills, today
        )

        composite = self.aggregator.aggregate(skill, experience, education, weights)
        return composite, red_flags
