"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Start every test from fresh config and logging state."""
    from skillmatch.config.settings import reset_settings
    from skillmatch.matching.config import reset_matching_config
    from skillmatch.utils.logging import reset_logging

    reset_settings()
    reset_matching_config()
    reset_logging()
    yield
    reset_settings()
    reset_matching_config()
    reset_logging()


@pytest.fixture
def today() -> date:
    """Fixed reference date so experience lengths are stable."""
    return date(2024, 1, 1)


@pytest.fixture
def matching_config():
    """MatchingConfig with defaults only (no .env file)."""
    from skillmatch.matching.config import MatchingConfig

    return MatchingConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def backend_job():
    """Job requiring Java, Spring and Hibernate with three years of experience."""
    from skillmatch.matching.models import JobRequirement

    return JobRequirement(
        job_id="job-backend",
        title="Backend Engineer",
        tech_stack=["Java", "Spring", "Hibernate"],
        required_years=3,
        employer_id="acme",
    )


@pytest.fixture
def make_candidate():
    """Factory for candidate profiles from compact arguments."""
    from skillmatch.matching.models import (
        CandidateProfile,
        EducationEntry,
        ExperienceEntry,
        SkillClaim,
    )

    def _make(
        candidate_id: str = "cand-1",
        skills: dict[str, int] | None = None,
        experience: list[tuple[date, date | None]] | None = None,
        degrees: list[str] | None = None,
    ) -> CandidateProfile:
        return CandidateProfile(
            candidate_id=candidate_id,
            name=candidate_id.title(),
            skills=[
                SkillClaim(name=name, proficiency_level=level)
                for name, level in (skills or {}).items()
            ],
            experience=[
                ExperienceEntry(position="Engineer", start_date=start, end_date=end)
                for start, end in (experience or [])
            ],
            education=[EducationEntry(degree=degree) for degree in degrees or []],
        )

    return _make
