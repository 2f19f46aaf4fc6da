"""Resume-to-job fit scoring.

Every engine honours the same contract: ``score`` is an integer in 60-100
and ``keywords`` is a subset of the job's skills, in the job's order.
"""
from __future__ import annotations

import random
import re
from typing import Iterable, Optional, Protocol

from jobwise.domain import MatchResult

MIN_SCORE = 60
MAX_SCORE = 100
# Chance that a skill is reported as matching by the random engine
KEEP_PROBABILITY = 0.7


class MatchingEngine(Protocol):
    def match(self, resume_text: str, job_skills: Iterable[str]) -> MatchResult:
        ...


class RandomMatchingEngine:
    """Placeholder scorer: ignores the resume and draws a random fit."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def match(self, resume_text: str, job_skills: Iterable[str]) -> MatchResult:
        score = self._rng.randint(MIN_SCORE, MAX_SCORE)
        keywords = tuple(s for s in job_skills if self._rng.random() < KEEP_PROBABILITY)
        return MatchResult(score=score, keywords=keywords)


def _skill_pattern(skill: str) -> re.Pattern:
    # Word-ish boundaries that still allow skills like "C++" or ".NET"
    return re.compile(r"(?<![\w])" + re.escape(skill.lower()) + r"(?![\w])")


class KeywordMatchingEngine:
    """Term-overlap scorer: a skill matches when it appears in the resume."""

    def match(self, resume_text: str, job_skills: Iterable[str]) -> MatchResult:
        skills = [s for s in job_skills if s.strip()]
        text = (resume_text or "").lower()
        keywords = tuple(s for s in skills if _skill_pattern(s.strip()).search(text))
        if not skills:
            return MatchResult(score=MIN_SCORE, keywords=())
        ratio = len(keywords) / len(skills)
        score = MIN_SCORE + round((MAX_SCORE - MIN_SCORE) * ratio)
        return MatchResult(score=score, keywords=keywords)


def create_matching_engine(name: str, rng: Optional[random.Random] = None) -> MatchingEngine:
    """Build a matching engine by name: 'random' or 'keyword'."""
    name_lower = (name or "").strip().lower()
    if name_lower == "random":
        return RandomMatchingEngine(rng)
    if name_lower == "keyword":
        return KeywordMatchingEngine()
    raise ValueError(f"Unknown matching engine: {name!r}. Use 'random' or 'keyword'.")
