"""
Domain exceptions and their HTTP mapping.

Services raise these; the API layer never builds error responses by hand.
`register_exception_handlers` wires them into a NinjaAPI instance.
"""
import logging
from typing import Any, Dict, Optional

from ninja import NinjaAPI
from ninja.errors import ValidationError as NinjaValidationError

logger = logging.getLogger(__name__)


class UserTasksError(Exception):
    """
    Base exception for the UserTasks API.

    Carries the HTTP status and a stable machine-readable code so every
    failure renders the same way.
    """
    status_code = 500
    code = "USERTASKS_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(UserTasksError):
    """Missing or malformed input."""
    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictError(UserTasksError):
    """A unique value (e.g. email) is already taken."""
    status_code = 400
    code = "CONFLICT"


class AuthError(UserTasksError):
    """Bad credentials, or a missing/invalid/expired bearer token."""
    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(UserTasksError):
    """Authenticated, but acting on another user's resource."""
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(UserTasksError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any = None):
        details = {"id": str(resource_id)} if resource_id is not None else None
        super().__init__(f"{resource} not found", details=details)
        self.resource = resource


def register_exception_handlers(api: NinjaAPI) -> None:
    """Install the domain error handlers on the given API."""

    @api.exception_handler(UserTasksError)
    def handle_domain_error(request, exc: UserTasksError):
        response = api.create_response(request, exc.to_dict(), status=exc.status_code)
        if isinstance(exc, AuthError):
            response["WWW-Authenticate"] = "Bearer"
        return response

    @api.exception_handler(NinjaValidationError)
    def handle_request_validation_error(request, exc: NinjaValidationError):
        logger.debug(f"Rejected request to {request.path}: {exc.errors}")
        return api.create_response(
            request,
            {
                "detail": "Invalid request",
                "code": ValidationError.code,
                "details": {"errors": exc.errors},
            },
            status=400,
        )
