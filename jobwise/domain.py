"""Domain types for jobs, applications and resume feedback."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Role(str, Enum):
    CANDIDATE = "candidate"
    EMPLOYER = "employer"


class JobStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    """Application lifecycle.

    applied -> in_review -> interview -> hired | rejected

    Stages may be skipped going forward; ``hired`` and ``rejected`` are terminal.
    """

    APPLIED = "applied"
    IN_REVIEW = "in_review"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    HIRED = "hired"

    @property
    def stage(self) -> int:
        return _STAGES[self]

    @property
    def is_terminal(self) -> bool:
        return self in (ApplicationStatus.HIRED, ApplicationStatus.REJECTED)

    def can_move_to(self, target: ApplicationStatus) -> bool:
        if self.is_terminal:
            return False
        return target.stage > self.stage


_STAGES = {
    ApplicationStatus.APPLIED: 0,
    ApplicationStatus.IN_REVIEW: 1,
    ApplicationStatus.INTERVIEW: 2,
    ApplicationStatus.REJECTED: 3,
    ApplicationStatus.HIRED: 3,
}


@dataclass(frozen=True)
class User:
    id: int
    display_name: str
    email: str
    role: Role
    avatar_ref: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", Role(self.role))


@dataclass(frozen=True)
class JobDraft:
    """Employer input for a new posting; requirements and skills are free text."""

    title: str
    company: str
    description: str
    location: str = ""
    requirements: str = ""
    skills: str = ""
    salary: Optional[str] = None


@dataclass(frozen=True)
class Job:
    id: int
    employer_id: int
    title: str
    company: str
    location: str
    description: str
    requirements: Tuple[str, ...]
    skills: Tuple[str, ...]
    status: JobStatus
    created_at: datetime
    salary: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status is JobStatus.ACTIVE


@dataclass(frozen=True)
class FeedbackSection:
    score: int
    suggestions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class KeywordSection:
    score: int
    matching: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResumeFeedback:
    grammar: FeedbackSection
    structure: FeedbackSection
    keywords: KeywordSection
    ats: FeedbackSection
    branding: FeedbackSection
    overall: int


@dataclass(frozen=True)
class MatchResult:
    score: int
    keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Application:
    id: int
    job_id: int
    candidate_id: int
    resume_text: str
    status: ApplicationStatus
    applied_at: datetime
    cover_letter: Optional[str] = None
    match_score: Optional[int] = None
    matching_keywords: Tuple[str, ...] = field(default_factory=tuple)
    feedback: Optional[ResumeFeedback] = None
    updated_at: Optional[datetime] = None
