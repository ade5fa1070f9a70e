"""Component scorers: skills, experience and education."""

from __future__ import annotations

import re
from datetime import date
from difflib import SequenceMatcher

from skillmatch.matching.config import MatchingConfig, get_matching_config
from skillmatch.matching.models import (
    EducationEntry,
    EducationMatchScore,
    ExperienceEntry,
    ExperienceMatchScore,
    JobRequirement,
    SkillClaim,
    SkillMatchDetail,
    SkillMatchScore,
    SkillMatchType,
)

MAX_PROFICIENCY = 10

_SKILL_ALIASES: dict[str, str] = {
    "js": "javascript",
    "ecmascript": "javascript",
    "ts": "typescript",
    "python3": "python",
    "py": "python",
    "golang": "go",
    "nodejs": "node.js",
    "node js": "node.js",
    "node": "node.js",
    "reactjs": "react",
    "react.js": "react",
    "react js": "react",
    "nextjs": "next.js",
    "next js": "next.js",
    "vuejs": "vue",
    "vue.js": "vue",
    "angularjs": "angular",
    "spring boot": "spring",
    "springboot": "spring",
    "spring framework": "spring",
    "k8s": "kubernetes",
    "postgres": "postgresql",
    "psql": "postgresql",
    "mongo": "mongodb",
    "mongo db": "mongodb",
    "ms sql": "sql server",
    "mssql": "sql server",
    "amazon web services": "aws",
    "gcp": "google cloud",
    "google cloud platform": "google cloud",
    "html5": "html",
    "css3": "css",
    "c sharp": "c#",
    "csharp": "c#",
    "cpp": "c++",
    "ml": "machine learning",
    "scikit learn": "scikit-learn",
    "sklearn": "scikit-learn",
}

_MATCH_PRIORITY = {
    SkillMatchType.EXACT: 0,
    SkillMatchType.ALIAS: 1,
    SkillMatchType.FUZZY: 2,
}


def normalize_skill(skill: str) -> str:
    """Normalize a skill string for comparison.

    Performs lowercasing, whitespace normalization, and trims common
    surrounding punctuation while preserving meaningful characters
    like "+", "#", and "." (e.g. "C++", "C#", "Node.js").
    """
    value = skill.strip().lower()
    value = re.sub(r"\([^)]*\)", "", value)
    value = re.sub(r"\s+", " ", value)
    return value.strip(" ,;")


def canonicalize_skill(skill: str) -> str:
    """Map a skill name onto its canonical spelling via the alias table."""
    normalized = normalize_skill(skill)
    return _SKILL_ALIASES.get(normalized, normalized)


def match_type(
    required: str, claimed: str, fuzzy: bool = False, threshold: float = 0.85
) -> SkillMatchType:
    """Classify how (if at all) a claimed skill satisfies a required one."""
    if normalize_skill(required) == normalize_skill(claimed):
        return SkillMatchType.EXACT

    canonical1 = canonicalize_skill(required)
    canonical2 = canonicalize_skill(claimed)
    if canonical1 == canonical2:
        return SkillMatchType.ALIAS

    if not fuzzy or threshold > 1.0:
        return SkillMatchType.NONE

    similarity = SequenceMatcher(None, canonical1, canonical2).ratio()
    if similarity >= threshold:
        return SkillMatchType.FUZZY
    return SkillMatchType.NONE


def skills_match(
    skill1: str, skill2: str, fuzzy: bool = False, threshold: float = 0.85
) -> bool:
    """Return True if two skills are considered a match."""
    kind = match_type(skill1, skill2, fuzzy=fuzzy, threshold=threshold)
    return kind != SkillMatchType.NONE


def unique_skills(skills: list[str]) -> list[str]:
    """Drop repeated skills (same name or alias), keeping first occurrences in order."""
    unique: list[str] = []
    for skill in skills:
        if not any(skills_match(skill, seen) for seen in unique):
            unique.append(skill)
    return unique


def clamp_proficiency(level: int) -> int:
    """Clamp a self-rated proficiency into the 0-10 scale."""
    return min(MAX_PROFICIENCY, max(0, int(level)))


def months_between(start: date, end: date) -> int:
    """Whole months from start to end (negative when end precedes start)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day:
        months -= 1
    elif months < 0 and end.day > start.day:
        months += 1
    return months


def entry_months(entry: ExperienceEntry, today: date) -> int:
    """Length of one experience entry in whole months, never negative."""
    end = entry.end_date or today
    return max(0, months_between(entry.start_date, end))


def total_experience_years(
    entries: list[ExperienceEntry], today: date | None = None
) -> float:
    """Sum of all entry lengths in years.

    Overlapping entries are counted independently, so concurrent roles add up.
    """
    today = today or date.today()
    return sum(entry_months(entry, today) for entry in entries) / 12.0


class SkillMatcher:
    """Scores a candidate's skill claims against a job's required stack."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    def score(self, skills: list[SkillClaim], job: JobRequirement) -> SkillMatchScore:
        details = tuple(
            self.match_skill(required, skills)
            for required in unique_skills(job.tech_stack)
        )
        if not details:
            return SkillMatchScore(weighted_score=0.0, details=())

        weighted_score = sum(d.contribution for d in details) / len(details)
        return SkillMatchScore(
            weighted_score=min(1.0, max(0.0, weighted_score)), details=details
        )

    def match_skill(self, required: str, skills: list[SkillClaim]) -> SkillMatchDetail:
        """Find the best claim for one required skill."""
        best: tuple[tuple[int, int], SkillClaim, SkillMatchType] | None = None

        for claim in skills:
            kind = match_type(
                required,
                claim.name,
                fuzzy=self.config.skill_fuzzy_match,
                threshold=self.config.skill_fuzzy_threshold,
            )
            if kind is SkillMatchType.NONE:
                continue
            rank = (_MATCH_PRIORITY[kind], -clamp_proficiency(claim.proficiency_level))
            if best is None or rank < best[0]:
                best = (rank, claim, kind)

        if best is None:
            return SkillMatchDetail(skill=required, matched=False)

        _, claim, kind = best
        proficiency = clamp_proficiency(claim.proficiency_level)
        return SkillMatchDetail(
            skill=required,
            matched=True,
            proficiency=proficiency,
            contribution=proficiency / MAX_PROFICIENCY,
            matched_name=claim.name,
            match_type=kind,
        )


class ExperienceMatcher:
    """Scores cumulative work experience against the job's required years."""

    def score(
        self,
        entries: list[ExperienceEntry],
        job: JobRequirement,
        today: date | None = None,
    ) -> ExperienceMatchScore:
        total_years = total_experience_years(entries, today)
        relevant = tuple(
            entry.position for entry in entries if _is_relevant(entry, job)
        )

        if job.required_years <= 0:
            weighted_score = 1.0
        else:
            weighted_score = min(total_years / job.required_years, 1.0)

        return ExperienceMatchScore(
            weighted_score=weighted_score,
            total_years=total_years,
            required_years=job.required_years,
            relevant_positions=relevant,
        )


class EducationMatcher:
    """Scores a candidate's credentials against the job's expectations."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    def score(
        self, entries: list[EducationEntry], job: JobRequirement
    ) -> EducationMatchScore:
        if not entries:
            return EducationMatchScore(weighted_score=0.0, reasoning="No education listed")

        highest = _highest_degree(entries)
        profile_level = education_level(highest.degree) if highest else None
        degree_name = highest.degree if highest else entries[0].degree

        required_level = (
            education_level(job.required_degree) if job.required_degree else None
        )
        if required_level is None:
            if profile_level is None:
                return EducationMatchScore(
                    weighted_score=self.config.education_presence_score,
                    highest_degree=degree_name,
                    reasoning="Degree listed, level not recognized",
                )
            return EducationMatchScore(
                weighted_score=_LEVEL_SCORES[profile_level],
                highest_degree=degree_name,
                reasoning="No education requirement",
            )

        if profile_level is not None and profile_level >= required_level:
            return EducationMatchScore(
                weighted_score=1.0,
                highest_degree=degree_name,
                reasoning="Meets education requirement",
            )
        if profile_level is not None and required_level - profile_level == 1:
            return EducationMatchScore(
                weighted_score=self.config.education_one_level_below_score,
                highest_degree=degree_name,
                reasoning="One level below education requirement",
            )
        return EducationMatchScore(
            weighted_score=self.config.education_below_requirement_score,
            highest_degree=degree_name,
            reasoning="Below education requirement",
        )


_LEVEL_SCORES: dict[int, float] = {5: 1.0, 4: 0.8, 3: 0.6, 2: 0.5, 1: 0.4}


_LEVEL_WORDS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (5, ("phd", "ph.d", "doctor")),
    (4, ("master",)),
    (3, ("bachelor",)),
    (2, ("associate",)),
    (1, ("high school", "diploma")),
)

# Abbreviations only count as the first word of the degree ("MSc Physics"),
# so "MS Office" in a certificate line is not read as a master's.
_LEADING_ABBREVIATIONS: tuple[tuple[int, re.Pattern[str]], ...] = (
    (4, re.compile(r"(mba|msc|m\.sc|ms|ma)\b")),
    (3, re.compile(r"(bsc|b\.sc|bs|ba|beng)\b")),
)


def education_level(value: str) -> int | None:
    """Map a degree description to an ordinal level (1 = high school, 5 = PhD)."""
    normalized = value.lower().strip()
    for level, words in _LEVEL_WORDS:
        if any(word in normalized for word in words):
            return level
    for level, pattern in _LEADING_ABBREVIATIONS:
        if pattern.match(normalized):
            return level
    return None


def _highest_degree(entries: list[EducationEntry]) -> EducationEntry | None:
    ranked = [(education_level(e.degree), i, e) for i, e in enumerate(entries)]
    ranked = [r for r in ranked if r[0] is not None]
    if not ranked:
        return None
    # Highest level wins; the earliest listed entry breaks ties.
    return max(ranked, key=lambda r: (r[0], -r[1]))[2]


def _is_relevant(entry: ExperienceEntry, job: JobRequirement) -> bool:
    title = job.title.lower().strip()
    if title and title in entry.position.lower():
        return True
    description = entry.description.lower()
    if not description:
        return False
    needles = [normalize_skill(skill) for skill in job.tech_stack]
    return any(needle and needle in description for needle in needles)
