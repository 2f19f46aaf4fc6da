"""JobService: lifecycle and authorization rules for jobs and applications."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from jobwise.domain import (
    Application,
    ApplicationStatus,
    Job,
    JobDraft,
    JobStatus,
    MatchResult,
    ResumeFeedback,
    Role,
    User,
)
from jobwise.errors import (
    ConstraintViolation,
    DuplicateApplication,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from jobwise.feedback import FeedbackEngine
from jobwise.forms import ApplicationForm, JobForm, validated
from jobwise.mapping import (
    application_from_row,
    feedback_to_dict,
    format_timestamp,
    job_from_row,
    parse_requirements,
    parse_skills,
)
from jobwise.matching import MAX_SCORE, MIN_SCORE, MatchingEngine
from jobwise.retry import retry
from jobwise.store import DomainStore

logger = logging.getLogger(__name__)

JOBS = "job"
APPLICATIONS = "application"
USERS = "user"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobService:
    """
    Owns the rules around jobs and applications. Collaborators are passed in:
    the store for persistence, a matching engine for fit scores and a
    feedback engine for resume reviews.

    Reads retry once on ``UpstreamFailure``; writes never retry.
    """

    def __init__(
        self,
        store: DomainStore,
        matcher: MatchingEngine,
        reviewer: FeedbackEngine,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        enforce_transitions: bool = True,
    ) -> None:
        self._store = store
        self._matcher = matcher
        self._reviewer = reviewer
        self._clock = clock or _utcnow
        self.enforce_transitions = enforce_transitions

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _require_role(self, actor: Optional[User], role: Role, action: str) -> User:
        if actor is None or actor.role != role:
            logger.warning("Permission denied: %s requires %s", action, role.value)
            raise PermissionDenied(f"Only {role.value}s can {action}")
        row = self._store.get(USERS, actor.id)
        if row is None:
            raise NotFound(f"User {actor.id} not found")
        if row.get("role") != role.value:
            logger.warning("Permission denied: user %s is not a %s", actor.id, role.value)
            raise PermissionDenied(f"Only {role.value}s can {action}")
        return actor

    def _owned_job(self, actor: Optional[User], job_id: int, action: str) -> Job:
        job = self.job_by_id(job_id)
        if job is None:
            raise NotFound(f"Job {job_id} not found")
        if actor is None or actor.id != job.employer_id:
            logger.warning(
                "Permission denied: user %s cannot %s job %s",
                getattr(actor, "id", None), action, job_id,
            )
            raise PermissionDenied(f"Only the employer who posted job {job_id} can {action} it")
        return job

    # ================= JOBS =================
    def create_job(self, actor: User, draft: JobDraft) -> Job:
        self._require_role(actor, Role.EMPLOYER, "post jobs")
        data = validated(
            JobForm,
            title=draft.title,
            company=draft.company,
            location=draft.location,
            description=draft.description,
            requirements=draft.requirements,
            skills=draft.skills,
            salary=draft.salary,
        )
        row = self._store.insert(JOBS, {
            "posted_by": actor.id,
            "title": data["title"].strip(),
            "company": data["company"].strip(),
            "location": (data["location"] or "").strip(),
            "description": data["description"].strip(),
            "requirements": list(parse_requirements(data["requirements"])),
            "skills": list(parse_skills(data["skills"])),
            "salary": (data["salary"] or "").strip() or None,
            "status": JobStatus.ACTIVE.value,
            "created_at": self._now(),
        })
        job = job_from_row(row)
        logger.info("Job %s posted by employer %s: %s", job.id, actor.id, job.title)
        return job

    def close_job(self, actor: User, job_id: int) -> Job:
        job = self._owned_job(actor, job_id, "close")
        if job.status is JobStatus.CLOSED:
            return job
        row = self._store.update(JOBS, job_id, {
            "status": JobStatus.CLOSED.value,
            "updated_at": self._now(),
        })
        logger.info("Job %s closed", job_id)
        return job_from_row(row)

    def delete_job(self, actor: User, job_id: int) -> None:
        self._owned_job(actor, job_id, "delete")
        self._store.delete(JOBS, job_id)
        logger.info("Job %s deleted by employer %s", job_id, actor.id)

    # ================= APPLICATIONS =================
    def apply_to_job(
        self,
        actor: User,
        job_id: int,
        resume_text: str,
        cover_letter: Optional[str] = None,
    ) -> Application:
        self._require_role(actor, Role.CANDIDATE, "apply to jobs")
        data = validated(ApplicationForm, resume=resume_text, cover_letter=cover_letter)

        job = self.job_by_id(job_id)
        if job is None:
            raise NotFound(f"Job {job_id} not found")
        if not job.is_active:
            raise ValidationError(f"Job {job_id} is closed")

        # Fast path; the unique constraint on (user_id, job_id) is authoritative
        if self._store.select_where(APPLICATIONS, user_id=actor.id, job_id=job_id):
            logger.warning("Candidate %s already applied to job %s", actor.id, job_id)
            raise DuplicateApplication(f"Already applied to job {job_id}")

        result = self._checked_match(data["resume"], job)
        try:
            row = self._store.insert(APPLICATIONS, {
                "job_id": job_id,
                "user_id": actor.id,
                "resume": data["resume"],
                "cover_letter": data["cover_letter"] or None,
                "score": result.score,
                "matching_keywords": list(result.keywords),
                "status": ApplicationStatus.APPLIED.value,
                "applied_at": self._now(),
            })
        except ConstraintViolation as exc:
            # A foreign key failure: the job was deleted after the lookup
            if self.job_by_id(job_id) is None:
                raise NotFound(f"Job {job_id} not found") from exc
            logger.warning("Candidate %s already applied to job %s", actor.id, job_id)
            raise DuplicateApplication(f"Already applied to job {job_id}") from exc

        application = application_from_row(row)
        logger.info(
            "Application %s submitted by candidate %s for job %s (score %s)",
            application.id, actor.id, job_id, application.match_score,
        )
        return application

    def update_application_status(
        self,
        actor: User,
        application_id: int,
        new_status,
    ) -> Application:
        try:
            target = ApplicationStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown application status: {new_status!r}") from None

        application = self.application_by_id(application_id)
        if application is None:
            raise NotFound(f"Application {application_id} not found")
        self._owned_job(actor, application.job_id, "review applications for")

        if self.enforce_transitions and not application.status.can_move_to(target):
            raise InvalidTransition(
                f"Cannot move application {application_id} "
                f"from {application.status.value} to {target.value}"
            )

        row = self._store.update(APPLICATIONS, application_id, {
            "status": target.value,
            "updated_at": self._now(),
        })
        logger.info(
            "Application %s status %s -> %s",
            application_id, application.status.value, target.value,
        )
        return application_from_row(row)

    def attach_feedback(self, actor: User, application_id: int) -> Application:
        """Review the stored resume and attach the result; only once per application."""
        application = self.application_by_id(application_id)
        if application is None:
            raise NotFound(f"Application {application_id} not found")
        if actor is None or actor.id != application.candidate_id:
            raise PermissionDenied("Only the applicant can request feedback")
        if application.feedback is not None:
            raise ValidationError(f"Application {application_id} already has feedback")

        feedback = self._reviewer.feedback(application.resume_text)
        row = self._store.update(APPLICATIONS, application_id, {
            "feedback": json.dumps(feedback_to_dict(feedback)),
            "updated_at": self._now(),
        })
        return application_from_row(row)

    # ================= ENGINES =================
    def _checked_match(self, resume_text: str, job: Job) -> MatchResult:
        """Run the matcher and reject a result outside its contract before anything is stored."""
        result = self._matcher.match(resume_text, job.skills)
        score = result.score
        if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
            raise ValidationError(f"Match score must be within {MIN_SCORE}-{MAX_SCORE}, got {score!r}")
        unknown = [k for k in result.keywords if k not in job.skills]
        if unknown:
            raise ValidationError(
                f"Matched keywords are not skills of job {job.id}: {', '.join(unknown)}"
            )
        return result

    def analyze_resume_for_job(self, resume_text: str, job_id: int) -> MatchResult:
        job = self.job_by_id(job_id)
        if job is None:
            raise NotFound(f"Job {job_id} not found")
        return self._checked_match(resume_text, job)

    def resume_feedback(self, resume_text: str) -> ResumeFeedback:
        return self._reviewer.feedback(resume_text)

    # ================= QUERIES =================
    @retry()
    def job_by_id(self, job_id: int) -> Optional[Job]:
        row = self._store.get(JOBS, job_id)
        return job_from_row(row) if row is not None else None

    @retry()
    def application_by_id(self, application_id: int) -> Optional[Application]:
        row = self._store.get(APPLICATIONS, application_id)
        return application_from_row(row) if row is not None else None

    @retry()
    def list_jobs(self, include_closed: bool = False) -> list[Job]:
        """All postings, newest first."""
        jobs = [job_from_row(r) for r in self._store.select_all(JOBS)]
        if not include_closed:
            jobs = [j for j in jobs if j.is_active]
        return sorted(jobs, key=lambda j: (j.created_at, j.id), reverse=True)

    @retry()
    def jobs_for_employer(self, employer_id: int) -> list[Job]:
        return [job_from_row(r) for r in self._store.select_where(JOBS, posted_by=employer_id)]

    @retry()
    def applications_for_candidate(self, candidate_id: int) -> list[Application]:
        rows = self._store.select_where(APPLICATIONS, user_id=candidate_id)
        return [application_from_row(r) for r in rows]

    @retry()
    def applications_for_job(self, job_id: int) -> list[Application]:
        rows = self._store.select_where(APPLICATIONS, job_id=job_id)
        return [application_from_row(r) for r in rows]

    def applications_for_employer(self, employer_id: int) -> list[Application]:
        applications = []
        for job in self.jobs_for_employer(employer_id):
            applications.extend(self.applications_for_job(job.id))
        return sorted(applications, key=lambda a: a.id, reverse=True)

    def jobs_for_user(self, actor: Optional[User]) -> list[Job]:
        if actor is None or actor.role != Role.EMPLOYER:
            return []
        return self.jobs_for_employer(actor.id)

    def applications_for_user(self, actor: Optional[User]) -> list[Application]:
        if actor is None or actor.role != Role.CANDIDATE:
            return []
        return self.applications_for_candidate(actor.id)
