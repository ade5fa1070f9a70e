"""Career-history anomaly detection.

Red flags are diagnostics for a human reviewer. They are reported next to a
match and never change its score.
"""

from __future__ import annotations

from datetime import date

from skillmatch.matching.config import MatchingConfig, get_matching_config
from skillmatch.matching.matchers import (
    clamp_proficiency,
    months_between,
    total_experience_years,
)
from skillmatch.matching.models import (
    ExperienceEntry,
    RedFlag,
    RedFlagDetection,
    RedFlagKind,
    RedFlagSeverity,
    SkillClaim,
)


class RedFlagDetector:
    """Inspects experience timelines and skill claims for anomalies."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    def detect(
        self,
        entries: list[ExperienceEntry],
        skills: list[SkillClaim],
        today: date | None = None,
    ) -> RedFlagDetection:
        today = today or date.today()
        warnings: list[RedFlag] = []

        warnings.extend(self._employment_gaps(entries))
        warnings.extend(self._overclaimed_skills(entries, skills, today))
        if skills and not entries:
            warnings.append(
                RedFlag(
                    kind=RedFlagKind.SKILLS_WITHOUT_EXPERIENCE,
                    detail="Candidate claims skills but has no work experience",
                )
            )

        return RedFlagDetection(warnings=tuple(warnings))

    def _employment_gaps(self, entries: list[ExperienceEntry]) -> list[RedFlag]:
        threshold = self.config.gap_threshold_months
        warning_threshold = self.config.gap_warning_months
        ordered = sorted(entries, key=lambda e: e.start_date)

        gaps: list[RedFlag] = []
        for previous, current in zip(ordered, ordered[1:]):
            if previous.end_date is None:
                continue
            gap_months = months_between(previous.end_date, current.start_date)
            if gap_months > threshold:
                severity = RedFlagSeverity.RED_FLAG
            elif warning_threshold is not None and gap_months > warning_threshold:
                severity = RedFlagSeverity.WARNING
            else:
                continue
            gaps.append(
                RedFlag(
                    kind=RedFlagKind.EMPLOYMENT_GAP,
                    detail=(
                        f"Employment gap of {gap_months} months from "
                        f"{previous.end_date.isoformat()} to "
                        f"{current.start_date.isoformat()}"
                    ),
                    months=gap_months,
                    severity=severity,
                )
            )
        return gaps

    def _overclaimed_skills(
        self,
        entries: list[ExperienceEntry],
        skills: list[SkillClaim],
        today: date,
    ) -> list[RedFlag]:
        min_tenure = self.config.overclaim_min_tenure_years
        years = total_experience_years(entries, today)
        if years >= min_tenure:
            return []

        flags: list[RedFlag] = []
        for claim in skills:
            level = clamp_proficiency(claim.proficiency_level)
            if level < self.config.overclaim_min_proficiency:
                continue
            flags.append(
                RedFlag(
                    kind=RedFlagKind.PROFICIENCY_OVERCLAIM,
                    detail=(
                        f"Proficiency {level}/10 claimed for {claim.name} "
                        f"with {years:.1f} years of experience "
                        f"(minimum {min_tenure:g})"
                    ),
                    skill=claim.name,
                )
            )
        return flags
