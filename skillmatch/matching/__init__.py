"""Job/candidate matching and ranking engine.

This package scores candidates against job requirements (skills,
experience, education), flags anomalies in career histories, and ranks
whole pools by a weighted composite score.

Public API:
    - MatchingService: Ranking and learning entry points
    - MatchRanker: Pool ranking against an anchor job or candidate
    - MatchScorer: Scoring of one candidate/job pair
    - WeightVector: Component weights for the composite score
    - MatchingConfig: Configuration settings
    - NotFoundError: Raised when an anchor entity does not exist
"""

from skillmatch.matching.aggregator import ScoreAggregator, WeightVector
from skillmatch.matching.config import (
    MatchingConfig,
    get_matching_config,
    reset_matching_config,
)
from skillmatch.matching.learning import (
    Decision,
    LearningFeedback,
    Outcome,
    WeightProvider,
)
from skillmatch.matching.matchers import (
    EducationMatcher,
    ExperienceMatcher,
    SkillMatcher,
)
from skillmatch.matching.models import (
    CandidateMatch,
    CandidateProfile,
    CompositeScore,
    EducationEntry,
    ExperienceEntry,
    JobMatch,
    JobRequirement,
    RedFlag,
    RedFlagDetection,
    RedFlagKind,
    RedFlagSeverity,
    SkillClaim,
)
from skillmatch.matching.ranker import MatchRanker
from skillmatch.matching.redflags import RedFlagDetector
from skillmatch.matching.repository import InMemoryRepository, NotFoundError, load_pool
from skillmatch.matching.scorer import MatchScorer
from skillmatch.matching.service import MatchingService, format_match
from skillmatch.matching.weights_store import WeightStore

__all__ = [
    "MatchingService",
    "MatchRanker",
    "MatchScorer",
    "SkillMatcher",
    "ExperienceMatcher",
    "EducationMatcher",
    "RedFlagDetector",
    "ScoreAggregator",
    "WeightVector",
    "WeightProvider",
    "WeightStore",
    "LearningFeedback",
    "Outcome",
    "Decision",
    "CandidateProfile",
    "JobRequirement",
    "SkillClaim",
    "ExperienceEntry",
    "EducationEntry",
    "CompositeScore",
    "CandidateMatch",
    "JobMatch",
    "RedFlag",
    "RedFlagKind",
    "RedFlagSeverity",
    "RedFlagDetection",
    "InMemoryRepository",
    "NotFoundError",
    "load_pool",
    "format_match",
    "MatchingConfig",
    "get_matching_config",
    "reset_matching_config",
]
