"""Error taxonomy for Workflow Manager.

Every error carries a stable ``code`` (used to pick the localized message
shown to the user) and the HTTP status the API answers with.
"""
from typing import Optional

from app.utils.messages import get_message


class WorkflowManagerError(Exception):
    """Base exception for Workflow Manager."""

    code = "unknown"
    status_code = 500

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or get_message(self.code)
        super().__init__(self.detail)


class PermissionDenied(WorkflowManagerError):
    """Raised when the resolved role does not allow the operation."""

    code = "permission_denied"
    status_code = 403


class ValidationError(WorkflowManagerError):
    """Raised on empty or otherwise unusable input."""

    code = "validation_error"
    status_code = 422


class Unauthenticated(WorkflowManagerError):
    code = "unauthenticated"
    status_code = 401


class AlreadyMember(WorkflowManagerError):
    code = "already_member"
    status_code = 409


class InvalidTarget(WorkflowManagerError):
    """Raised when a membership operation targets the owner or a non-member."""

    code = "invalid_target"
    status_code = 400


class TerminalState(WorkflowManagerError):
    code = "terminal_state"
    status_code = 409


class InviteNotFound(WorkflowManagerError):
    code = "invite_not_found"
    status_code = 404


class NotFound(WorkflowManagerError):
    code = "not_found"
    status_code = 404


# Identity provider errors

class EmailInUse(WorkflowManagerError):
    code = "email_in_use"
    status_code = 409


class InvalidEmail(WorkflowManagerError):
    code = "invalid_email"
    status_code = 422


class WeakPassword(WorkflowManagerError):
    code = "weak_password"
    status_code = 422


class InvalidCredentials(WorkflowManagerError):
    code = "invalid_credentials"
    status_code = 401


# Collaborator failures

class NetworkFailure(WorkflowManagerError):
    """Raised when the store, the identity provider or the mail relay is unreachable."""

    code = "network_failure"
    status_code = 503


class UnknownFailure(WorkflowManagerError):
    code = "unknown"
    status_code = 500
