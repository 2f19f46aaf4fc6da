"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from jobwise.app import create_app
from jobwise.domain import FeedbackSection, JobDraft, KeywordSection, MatchResult, ResumeFeedback
from jobwise.mapping import user_from_row
from jobwise.service import JobService
from jobwise.store import DomainStore


class FixedMatcher:
    """Deterministic matcher: every skill present in the resume, fixed score."""

    def __init__(self, score: int = 80) -> None:
        self.score = score
        self.calls = []

    def match(self, resume_text, job_skills):
        self.calls.append((resume_text, tuple(job_skills)))
        keywords = tuple(s for s in job_skills if s.lower() in resume_text.lower())
        return MatchResult(score=self.score, keywords=keywords)


class FixedReviewer:
    def __init__(self) -> None:
        self.calls = 0

    def feedback(self, resume_text):
        self.calls += 1
        return ResumeFeedback(
            grammar=FeedbackSection(90, ("Use active voice.",)),
            structure=FeedbackSection(85, ()),
            keywords=KeywordSection(70, ("Python",), ("Kubernetes",)),
            ats=FeedbackSection(80, ("Avoid tables.",)),
            branding=FeedbackSection(75, ()),
            overall=82,
        )


class StepClock:
    """Returns a later UTC timestamp on every call."""

    def __init__(self) -> None:
        self.current = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=1)
        return self.current


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "JOBWISE_SEED": 7,
    })
    with app.app_context():
        yield app


@pytest.fixture
def store(app):
    return DomainStore()


@pytest.fixture
def matcher():
    return FixedMatcher()


@pytest.fixture
def reviewer():
    return FixedReviewer()


@pytest.fixture
def service(store, matcher, reviewer):
    return JobService(store, matcher, reviewer, clock=StepClock())


@pytest.fixture
def make_user(store):
    def _make(username: str, role: str):
        row = store.insert("user", {
            "username": username,
            "email": f"{username}@example.com",
            "password": "not-a-real-hash",
            "role": role,
        })
        return user_from_row(row)

    return _make


@pytest.fixture
def employer(make_user):
    return make_user("erin", "employer")


@pytest.fixture
def candidate(make_user):
    return make_user("carl", "candidate")


@pytest.fixture
def draft() -> JobDraft:
    return JobDraft(
        title="Backend Engineer",
        company="Acme",
        location="Remote",
        description="Build and run our APIs.",
        requirements="3+ years backend experience\n\n  Strong SQL  \n",
        skills="Go, SQL, , Go",
        salary="$120k",
    )


@pytest.fixture
def job(service, employer, draft):
    return service.create_job(employer, draft)


@pytest.fixture
def sample_resume_text() -> str:
    return """Carl Candidate
Backend developer, 5 years.

- Built Go services handling 10k requests per second
- Tuned SQL queries on PostgreSQL
"""
