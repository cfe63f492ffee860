"""
exceptions.py — Client error taxonomy
Every failure raised by the client derives from GrabGoalsError.
"""


class GrabGoalsError(Exception):
    """Base class for client errors."""


class NotAuthenticated(GrabGoalsError):
    """No logged-in user or token for an operation that needs one."""

    def __init__(self, message: str = "Oops! looks like you're not logged in."):
        super().__init__(message)


class InvalidInput(GrabGoalsError):
    """Caller-supplied values were rejected before reaching the backend."""


class GoalAlreadyActive(GrabGoalsError):
    """A goal is already in progress for this session."""


class BackendUnavailable(GrabGoalsError):
    """Network or API failure while talking to the backend."""


class ApiError(BackendUnavailable):
    """The backend answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class Unauthorized(ApiError):
    """The backend rejected the bearer token (HTTP 401)."""

    def __init__(self, message: str = "Unauthorized", status_code: int = 401):
        super().__init__(message, status_code)
