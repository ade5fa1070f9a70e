"""Data models for the matching engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from skillmatch.matching.aggregator import WeightVector


class SkillClaim(BaseModel):
    """A skill a candidate claims, with a self-rated proficiency (1-10)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Skill name")
    proficiency_level: int = Field(
        default=5, description="Self-rated proficiency, nominally 1-10"
    )


class ExperienceEntry(BaseModel):
    """Work experience entry for a candidate profile."""

    model_config = ConfigDict(frozen=True)

    position: str = Field(..., description="Job title held")
    company: str = Field(default="", description="Company name")
    description: str = Field(default="", description="Role description")
    start_date: date = Field(..., description="Start date")
    end_date: date | None = Field(
        default=None, description="End date (None while ongoing)"
    )


class EducationEntry(BaseModel):
    """Education entry for a candidate profile."""

    model_config = ConfigDict(frozen=True)

    degree: str = Field(..., description="Degree name or level")
    institution: str = Field(default="", description="Institution name")
    field: str = Field(default="", description="Field of study")


class CandidateProfile(BaseModel):
    """Snapshot of a candidate used for one scoring run."""

    model_config = ConfigDict(frozen=True)

    candidate_id: str = Field(..., description="Candidate identity")
    name: str = Field(default="", description="Candidate display name")
    skills: list[SkillClaim] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> CandidateProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class JobRequirement(BaseModel):
    """Snapshot of a job posting's requirements used for one scoring run."""

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(..., description="Job identity")
    title: str = Field(default="", description="Job title / profile")
    description: str = Field(default="", description="Free-text description")
    tech_stack: list[str] = Field(
        default_factory=list, description="Required skills, in priority order"
    )
    required_years: int = Field(
        default=0, ge=0, description="Required years of experience"
    )
    employer_id: str | None = Field(default=None, description="Employer identity")
    required_degree: str | None = Field(
        default=None, description="Minimum degree level, e.g. 'bachelor'"
    )

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> JobRequirement:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


def _check_unit_interval(owner: object, *names: str) -> None:
    for name in names:
        value = getattr(owner, name)
        if not (0.0 <= value <= 1.0):
            raise ValueError(f"{name} must be between 0.0 and 1.0 (got {value})")


class SkillMatchType(str, Enum):
    """How a required skill was matched."""

    EXACT = "exact"
    ALIAS = "alias"
    FUZZY = "fuzzy"
    NONE = "none"


@dataclass(frozen=True)
class SkillMatchDetail:
    """Match outcome for a single required skill."""

    skill: str
    matched: bool
    proficiency: int = 0
    contribution: float = 0.0
    matched_name: str | None = None
    match_type: SkillMatchType = SkillMatchType.NONE

    def __post_init__(self) -> None:
        _check_unit_interval(self, "contribution")


@dataclass(frozen=True)
class SkillMatchScore:
    """Per-skill breakdown and aggregate skill score."""

    weighted_score: float
    details: tuple[SkillMatchDetail, ...] = ()

    def __post_init__(self) -> None:
        _check_unit_interval(self, "weighted_score")

    @property
    def matched_skills(self) -> list[str]:
        return [d.skill for d in self.details if d.matched]

    @property
    def missing_skills(self) -> list[str]:
        return [d.skill for d in self.details if not d.matched]


@dataclass(frozen=True)
class ExperienceMatchScore:
    """Experience comparison against the job's required years."""

    weighted_score: float
    total_years: float = 0.0
    required_years: int = 0
    relevant_positions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_unit_interval(self, "weighted_score")


@dataclass(frozen=True)
class EducationMatchScore:
    """Education alignment score."""

    weighted_score: float
    highest_degree: str | None = None
    reasoning: str = ""

    def __post_init__(self) -> None:
        _check_unit_interval(self, "weighted_score")


class RedFlagSeverity(str, Enum):
    """How strongly a finding should weigh in a human review."""

    RED_FLAG = "red_flag"
    WARNING = "warning"


class RedFlagKind(str, Enum):
    """Categories of career-history anomalies."""

    EMPLOYMENT_GAP = "employment_gap"
    PROFICIENCY_OVERCLAIM = "proficiency_overclaim"
    SKILLS_WITHOUT_EXPERIENCE = "skills_without_experience"


@dataclass(frozen=True)
class RedFlag:
    """A single diagnostic warning about a candidate's history."""

    kind: RedFlagKind
    detail: str
    months: int | None = None
    skill: str | None = None
    severity: RedFlagSeverity = RedFlagSeverity.RED_FLAG


@dataclass(frozen=True)
class RedFlagDetection:
    """All warnings raised for a candidate. Empty means clean."""

    warnings: tuple[RedFlag, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def of_kind(self, kind: RedFlagKind) -> list[RedFlag]:
        """Return the warnings of a given kind."""
        return [w for w in self.warnings if w.kind == kind]

    def of_severity(self, severity: RedFlagSeverity) -> list[RedFlag]:
        return [w for w in self.warnings if w.severity == severity]


@dataclass(frozen=True)
class CompositeScore:
    """Component scores combined into the single ranking key."""

    total_score: float
    skill: SkillMatchScore
    experience: ExperienceMatchScore
    education: EducationMatchScore
    weights: WeightVector

    def __post_init__(self) -> None:
        _check_unit_interval(self, "total_score")


@dataclass(frozen=True)
class CandidateMatch:
    """A candidate ranked against an anchor job."""

    candidate: CandidateProfile
    score: CompositeScore
    red_flags: RedFlagDetection = field(default_factory=RedFlagDetection)

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "candidate": self.candidate.to_dict(),
            "score": asdict(self.score),
            "red_flags": asdict(self.red_flags),
        }


@dataclass(frozen=True)
class JobMatch:
    """A job ranked against an anchor candidate."""

    job: JobRequirement
    score: CompositeScore
    red_flags: RedFlagDetection = field(default_factory=RedFlagDetection)

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "job": self.job.to_dict(),
            "score": asdict(self.score),
            "red_flags": asdict(self.red_flags),
        }
