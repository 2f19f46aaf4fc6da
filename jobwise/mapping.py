"""Conversion between store rows (column names) and domain objects.

Rows coming back from the store are checked strictly: a missing column, a
value of the wrong type, an unknown enum value or a score outside 0-100
raises ``ValidationError`` instead of leaking a half-formed object into the
service.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from jobwise.domain import (
    Application,
    ApplicationStatus,
    FeedbackSection,
    Job,
    JobStatus,
    KeywordSection,
    ResumeFeedback,
    Role,
    User,
)
from jobwise.errors import ValidationError

_FEEDBACK_SECTIONS = ("grammar", "structure", "ats", "branding")


# --- free-text parsing ---
def parse_requirements(text: Optional[str]) -> tuple[str, ...]:
    """One requirement per line, blank lines dropped."""
    if not text:
        return ()
    return tuple(line.strip() for line in text.splitlines() if line.strip())


def parse_skills(text: Optional[str]) -> tuple[str, ...]:
    """Comma separated skills, blanks and repeats dropped, first spelling kept."""
    if not text:
        return ()
    skills = (s.strip() for s in text.split(","))
    return tuple(dict.fromkeys(s for s in skills if s))


# --- field helpers ---
def _require(row: dict[str, Any], key: str, table: str) -> Any:
    if key not in row:
        raise ValidationError(f"{table} row missing {key!r}")
    return row[key]


def _int(value: Any, key: str, table: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{table}.{key} must be an integer, got {value!r}")
    return value


def _str(value: Any, key: str, table: str, *, optional: bool = False) -> Optional[str]:
    if value is None and optional:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{table}.{key} must be a string, got {value!r}")
    return value


def _strings(value: Any, key: str, table: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{table}.{key} must be a list of strings, got {value!r}")
    return tuple(value)


def _score(value: Any, key: str, table: str) -> int:
    score = _int(value, key, table)
    if not 0 <= score <= 100:
        raise ValidationError(f"{table}.{key} must be within 0-100, got {score}")
    return score


def _enum(enum_cls, value: Any, key: str, table: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{table}.{key} has unknown value {value!r}") from None


def _timestamp(value: Any, key: str, table: str, *, optional: bool = False) -> Optional[datetime]:
    if value is None and optional:
        return None
    text = _str(value, key, table)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{table}.{key} is not an ISO timestamp: {text!r}") from None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# --- user ---
def user_from_row(row: dict[str, Any]) -> User:
    table = "user"
    return User(
        id=_int(_require(row, "id", table), "id", table),
        display_name=_str(_require(row, "username", table), "username", table),
        email=_str(_require(row, "email", table), "email", table),
        role=_enum(Role, _require(row, "role", table), "role", table),
        avatar_ref=_str(row.get("avatar"), "avatar", table, optional=True),
    )


# --- job ---
def job_to_row(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "posted_by": job.employer_id,
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "description": job.description,
        "requirements": list(job.requirements),
        "skills": list(job.skills),
        "salary": job.salary,
        "status": job.status.value,
        "created_at": format_timestamp(job.created_at),
        "updated_at": format_timestamp(job.updated_at),
    }


def job_from_row(row: dict[str, Any]) -> Job:
    table = "job"
    return Job(
        id=_int(_require(row, "id", table), "id", table),
        employer_id=_int(_require(row, "posted_by", table), "posted_by", table),
        title=_str(_require(row, "title", table), "title", table),
        company=_str(_require(row, "company", table), "company", table),
        location=_str(row.get("location"), "location", table, optional=True) or "",
        description=_str(_require(row, "description", table), "description", table),
        requirements=_strings(row.get("requirements"), "requirements", table),
        skills=_strings(row.get("skills"), "skills", table),
        salary=_str(row.get("salary"), "salary", table, optional=True),
        status=_enum(JobStatus, _require(row, "status", table), "status", table),
        created_at=_timestamp(_require(row, "created_at", table), "created_at", table),
        updated_at=_timestamp(row.get("updated_at"), "updated_at", table, optional=True),
    )


# --- feedback ---
def feedback_to_dict(feedback: ResumeFeedback) -> dict[str, Any]:
    data: dict[str, Any] = {
        name: {
            "score": getattr(feedback, name).score,
            "suggestions": list(getattr(feedback, name).suggestions),
        }
        for name in _FEEDBACK_SECTIONS
    }
    data["keywords"] = {
        "score": feedback.keywords.score,
        "matching": list(feedback.keywords.matching),
        "missing": list(feedback.keywords.missing),
    }
    data["overall"] = feedback.overall
    return data


def feedback_from_dict(data: Any) -> ResumeFeedback:
    table = "feedback"
    if not isinstance(data, dict):
        raise ValidationError(f"feedback must be an object, got {data!r}")

    def section(name: str) -> dict[str, Any]:
        value = _require(data, name, table)
        if not isinstance(value, dict):
            raise ValidationError(f"feedback.{name} must be an object")
        return value

    sections = {}
    for name in _FEEDBACK_SECTIONS:
        value = section(name)
        sections[name] = FeedbackSection(
            score=_score(_require(value, "score", table), f"{name}.score", table),
            suggestions=_strings(value.get("suggestions"), f"{name}.suggestions", table),
        )
    kw = section("keywords")
    return ResumeFeedback(
        keywords=KeywordSection(
            score=_score(_require(kw, "score", table), "keywords.score", table),
            matching=_strings(kw.get("matching"), "keywords.matching", table),
            missing=_strings(kw.get("missing"), "keywords.missing", table),
        ),
        overall=_score(_require(data, "overall", table), "overall", table),
        **sections,
    )


# --- application ---
def application_to_row(application: Application) -> dict[str, Any]:
    feedback = application.feedback
    return {
        "id": application.id,
        "job_id": application.job_id,
        "user_id": application.candidate_id,
        "resume": application.resume_text,
        "cover_letter": application.cover_letter,
        "score": application.match_score,
        "matching_keywords": list(application.matching_keywords),
        "status": application.status.value,
        "feedback": json.dumps(feedback_to_dict(feedback)) if feedback else None,
        "applied_at": format_timestamp(application.applied_at),
        "updated_at": format_timestamp(application.updated_at),
    }


def application_from_row(row: dict[str, Any]) -> Application:
    table = "application"
    score = row.get("score")
    raw_feedback = _str(row.get("feedback"), "feedback", table, optional=True)
    feedback = None
    if raw_feedback:
        try:
            feedback = feedback_from_dict(json.loads(raw_feedback))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"application.feedback is not valid JSON: {exc}") from exc
    return Application(
        id=_int(_require(row, "id", table), "id", table),
        job_id=_int(_require(row, "job_id", table), "job_id", table),
        candidate_id=_int(_require(row, "user_id", table), "user_id", table),
        resume_text=_str(_require(row, "resume", table), "resume", table),
        cover_letter=_str(row.get("cover_letter"), "cover_letter", table, optional=True),
        match_score=_score(score, "score", table) if score is not None else None,
        matching_keywords=_strings(row.get("matching_keywords"), "matching_keywords", table),
        status=_enum(ApplicationStatus, _require(row, "status", table), "status", table),
        feedback=feedback,
        applied_at=_timestamp(_require(row, "applied_at", table), "applied_at", table),
        updated_at=_timestamp(row.get("updated_at"), "updated_at", table, optional=True),
    )
