"""JobWise: job postings, applications and resume matching."""

from jobwise.app import create_app, get_identity, get_service
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
    DuplicateApplication,
    InvalidTransition,
    JobWiseError,
    NotFound,
    PermissionDenied,
    UpstreamFailure,
    ValidationError,
)
from jobwise.service import JobService

__all__ = [
    "Application",
    "ApplicationStatus",
    "DuplicateApplication",
    "InvalidTransition",
    "Job",
    "JobDraft",
    "JobService",
    "JobStatus",
    "JobWiseError",
    "MatchResult",
    "NotFound",
    "PermissionDenied",
    "ResumeFeedback",
    "Role",
    "UpstreamFailure",
    "User",
    "ValidationError",
    "create_app",
    "get_identity",
    "get_service",
]
