"""Error types raised by the JobWise domain service and its collaborators."""


class JobWiseError(Exception):
    """Base class for every error the domain layer raises."""


class PermissionDenied(JobWiseError):
    """The actor lacks the role or ownership the operation requires."""


class NotFound(JobWiseError):
    """A referenced job, application or user does not exist."""


class DuplicateApplication(JobWiseError):
    """The candidate already applied to this job."""


class ValidationError(JobWiseError):
    """Malformed input or a malformed record coming back from the store."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}


class InvalidTransition(JobWiseError):
    """The requested application status change is not a forward move."""


class UpstreamFailure(JobWiseError):
    """The store or identity provider call failed."""


class ConstraintViolation(UpstreamFailure):
    """The store rejected a write because of a uniqueness constraint."""
