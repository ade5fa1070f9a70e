"""Configuration settings for the matching engine."""

from __future__ import annotations

import logging
from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillmatch.matching.aggregator import WeightVector

logger = logging.getLogger(__name__)


class MatchingConfig(BaseSettings):
    """Matching engine configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with `MATCHING_` prefix or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Scoring weights (normalized to sum to 1.0)
    weight_skill: Annotated[float, Field(ge=0.0)] = Field(
        default=0.50,
        description="Weight for the skill match component",
    )
    weight_experience: Annotated[float, Field(ge=0.0)] = Field(
        default=0.30,
        description="Weight for the experience match component",
    )
    weight_education: Annotated[float, Field(ge=0.0)] = Field(
        default=0.20,
        description="Weight for the education match component",
    )

    # Skill matching
    skill_fuzzy_match: bool = Field(
        default=False,
        description="Also accept near-identical skill names (difflib ratio)",
    )
    skill_fuzzy_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.85,
        description="Similarity threshold for fuzzy matching",
    )

    # Education
    education_presence_score: Annotated[float, Field(gt=0.0, le=1.0)] = Field(
        default=0.5,
        description="Score for a listed degree whose level is not recognized",
    )
    education_one_level_below_score: Annotated[float, Field(gt=0.0, le=1.0)] = (
        Field(
            default=0.5,
            description="Score when the highest degree is one level below the requirement",
        )
    )
    education_below_requirement_score: Annotated[float, Field(gt=0.0, le=1.0)] = (
        Field(
            default=0.2,
            description="Score when the highest degree is 2+ levels below the requirement",
        )
    )

    # Red flags
    gap_threshold_months: Annotated[int, Field(ge=0)] = Field(
        default=6,
        description="Employment gaps longer than this many months are flagged",
    )
    gap_warning_months: Annotated[int, Field(ge=0)] | None = Field(
        default=None,
        description=(
            "Shorter gaps longer than this many months are reported as "
            "warnings (unset disables the warning tier)"
        ),
    )
    overclaim_min_proficiency: Annotated[int, Field(ge=1, le=10)] = Field(
        default=9,
        description="Proficiency at or above which tenure is checked",
    )
    overclaim_min_tenure_years: Annotated[float, Field(ge=0.0)] = Field(
        default=2.0,
        description="Minimum total experience backing a high proficiency claim",
    )

    # Learning feedback
    learning_rate: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.05,
        description="Step size applied to weights per observed outcome",
    )
    learning_min_weight: Annotated[float, Field(ge=0.0, lt=1.0)] = Field(
        default=0.05,
        description="Lower bound for any weight after a learning update",
    )

    @model_validator(mode="after")
    def normalize_weights(self) -> MatchingConfig:
        """Rescale the weights so they sum to 1.0."""
        weights = WeightVector.normalized(
            self.weight_skill, self.weight_experience, self.weight_education
        )
        if weights != WeightVector(
            self.weight_skill, self.weight_experience, self.weight_education
        ):
            logger.warning(
                "Matching weights do not sum to 1.0 "
                "(skill=%s, experience=%s, education=%s); normalized to %s",
                self.weight_skill,
                self.weight_experience,
                self.weight_education,
                weights,
            )
        self.weight_skill = weights.skill
        self.weight_experience = weights.experience
        self.weight_education = weights.education
        return self

    @property
    def weights(self) -> WeightVector:
        """Configured weight vector."""
        return WeightVector(
            self.weight_skill, self.weight_experience, self.weight_education
        )


_matching_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the matching configuration singleton."""
    global _matching_config
    if _matching_config is None:
        _matching_config = MatchingConfig()
    return _matching_config


def reset_matching_config() -> None:
    """Reset the matching configuration singleton (useful for testing)."""
    global _matching_config
    _matching_config = None
