"""SkillMatch: explainable job/candidate matching and ranking."""

__version__ = "0.1.0"
