"""Entity lookup interfaces and a file-backed in-memory implementation.

The engine only depends on the two protocols below. Anything that can
answer these lookups (a database layer, an API client, a fixture) can feed
the ranker.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

import yaml

from skillmatch.matching.models import (
    CandidateProfile,
    EducationEntry,
    ExperienceEntry,
    JobRequirement,
    SkillClaim,
)


class NotFoundError(LookupError):
    """An anchor entity (job or candidate) does not exist."""

    def __init__(self, entity_kind: str, entity_id: str) -> None:
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind.capitalize()} not found: {entity_id}")


class JobRepository(Protocol):
    async def get_job_by_id(self, job_id: str) -> JobRequirement | None: ...

    async def list_all_jobs(self) -> list[JobRequirement]: ...


class CandidateRepository(Protocol):
    async def get_candidate_by_id(
        self, candidate_id: str
    ) -> CandidateProfile | None: ...

    async def list_all_candidates(self) -> list[CandidateProfile]: ...

    async def get_skills(self, candidate_id: str) -> list[SkillClaim]: ...

    async def get_experience(self, candidate_id: str) -> list[ExperienceEntry]: ...

    async def get_education(self, candidate_id: str) -> list[EducationEntry]: ...


class InMemoryRepository:
    """Serves jobs and candidates from memory, in insertion order."""

    def __init__(
        self,
        jobs: list[JobRequirement] | None = None,
        candidates: list[CandidateProfile] | None = None,
    ) -> None:
        self._jobs: dict[str, JobRequirement] = {}
        self._candidates: dict[str, CandidateProfile] = {}
        for job in jobs or []:
            self.add_job(job)
        for candidate in candidates or []:
            self.add_candidate(candidate)

    def add_job(self, job: JobRequirement) -> None:
        self._jobs[job.job_id] = job

    def add_candidate(self, candidate: CandidateProfile) -> None:
        self._candidates[candidate.candidate_id] = candidate

    async def get_job_by_id(self, job_id: str) -> JobRequirement | None:
        return self._jobs.get(job_id)

    async def list_all_jobs(self) -> list[JobRequirement]:
        return list(self._jobs.values())

    async def get_candidate_by_id(self, candidate_id: str) -> CandidateProfile | None:
        return self._candidates.get(candidate_id)

    async def list_all_candidates(self) -> list[CandidateProfile]:
        return list(self._candidates.values())

    async def get_skills(self, candidate_id: str) -> list[SkillClaim]:
        candidate = self._candidates.get(candidate_id)
        return list(candidate.skills) if candidate else []

    async def get_experience(self, candidate_id: str) -> list[ExperienceEntry]:
        candidate = self._candidates.get(candidate_id)
        return list(candidate.experience) if candidate else []

    async def get_education(self, candidate_id: str) -> list[EducationEntry]:
        candidate = self._candidates.get(candidate_id)
        return list(candidate.education) if candidate else []


def load_pool(path: Path | str) -> InMemoryRepository:
    """Load a jobs/candidates pool from a YAML or JSON file.

    The file must be a mapping with optional ``jobs`` and ``candidates``
    lists. Record validation errors propagate as pydantic.ValidationError.
    """
    pool_path = Path(path)
    if not pool_path.exists():
        raise FileNotFoundError(f"Pool file not found: {pool_path}")

    suffix = pool_path.suffix.lower()
    if suffix == ".json":
        data = _load_json(pool_path)
    else:
        data = _load_yaml(pool_path)

    jobs = [JobRequirement.model_validate(item) for item in data.get("jobs") or []]
    candidates = [
        CandidateProfile.model_validate(item) for item in data.get("candidates") or []
    ]
    return InMemoryRepository(jobs=jobs, candidates=candidates)


def _load_yaml(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML pool file: {path}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Pool file must be a mapping/dict: {path}")
    return data


def _load_json(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON pool file: {path}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Pool file must be a mapping/dict: {path}")
    return data
