"""Resume quality feedback."""
from __future__ import annotations

import random
from typing import Optional, Protocol

from jobwise.domain import FeedbackSection, KeywordSection, ResumeFeedback

GRAMMAR_SUGGESTIONS = (
    "Consider using more active voice throughout your resume.",
    "Fix spelling errors in your technical skills section.",
)
STRUCTURE_SUGGESTIONS = (
    "Your work experience section is well-organized.",
    "Consider adding more quantifiable achievements.",
)
ATS_SUGGESTIONS = (
    "Your resume uses a good, ATS-friendly format.",
    "Consider removing complex tables or graphics.",
)
BRANDING_SUGGESTIONS = (
    "Your personal statement could better highlight your unique value.",
    "Consider adding a professional summary section.",
)
MATCHING_KEYWORDS = ("development", "React", "JavaScript", "teamwork")
MISSING_KEYWORDS = ("TypeScript", "project management", "agile")


class FeedbackEngine(Protocol):
    def feedback(self, resume_text: str) -> ResumeFeedback:
        ...


class RandomFeedbackEngine:
    """Placeholder reviewer: random scores per category, fixed advice."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def _draw(self, low: int) -> int:
        return self._rng.randrange(low, 100)

    def feedback(self, resume_text: str) -> ResumeFeedback:
        return ResumeFeedback(
            grammar=FeedbackSection(self._draw(70), GRAMMAR_SUGGESTIONS),
            structure=FeedbackSection(self._draw(80), STRUCTURE_SUGGESTIONS),
            keywords=KeywordSection(self._draw(60), MATCHING_KEYWORDS, MISSING_KEYWORDS),
            ats=FeedbackSection(self._draw(70), ATS_SUGGESTIONS),
            branding=FeedbackSection(self._draw(60), BRANDING_SUGGESTIONS),
            overall=self._draw(70),
        )
