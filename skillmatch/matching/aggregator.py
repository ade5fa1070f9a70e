"""Weighted aggregation of component scores."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from skillmatch.matching.models import (
    CompositeScore,
    EducationMatchScore,
    ExperienceMatchScore,
    SkillMatchScore,
)

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 1e-6


@dataclass(frozen=True)
class WeightVector:
    """Relative weight of each component score in the composite score."""

    skill: float = 0.5
    experience: float = 0.3
    education: float = 0.2

    @classmethod
    def normalized(
        cls, skill: float, experience: float, education: float
    ) -> WeightVector:
        """Build a vector that sums to 1.0.

        Negative weights are treated as 0. Weights already summing to 1.0
        (within tolerance) are kept as given; an all-zero vector falls back
        to the default.
        """
        values = [max(0.0, float(w)) for w in (skill, experience, education)]
        total = sum(values)
        if total <= 0.0:
            return cls()
        if abs(total - 1.0) <= WEIGHT_SUM_TOLERANCE:
            return cls(*values)
        return cls(*(v / total for v in values))

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.skill, self.experience, self.education)


DEFAULT_WEIGHTS = WeightVector()


class ScoreAggregator:
    """Combines component scores into a CompositeScore."""

    def __init__(self, default_weights: WeightVector | None = None) -> None:
        self.default_weights = default_weights or DEFAULT_WEIGHTS

    def aggregate(
        self,
        skill: SkillMatchScore,
        experience: ExperienceMatchScore,
        education: EducationMatchScore,
        weights: WeightVector | None = None,
    ) -> CompositeScore:
        """Compute the weighted total of the three component scores."""
        weights = self._checked(weights or self.default_weights)

        total_score = (
            weights.skill * skill.weighted_score
            + weights.experience * experience.weighted_score
            + weights.education * education.weighted_score
        )

        return CompositeScore(
            total_score=min(1.0, max(0.0, total_score)),
            skill=skill,
            experience=experience,
            education=education,
            weights=weights,
        )

    @staticmethod
    def _checked(weights: WeightVector) -> WeightVector:
        fixed = WeightVector.normalized(*weights.as_tuple())
        if fixed != weights:
            logger.warning("Weight vector %s normalized to %s", weights, fixed)
        return fixed
