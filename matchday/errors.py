"""
Error taxonomy shared by models and services.

Every domain error belongs to one category. The HTTP layer maps the
category to a status code; the concrete class carries the message and,
where it needs a more specific one, its own response code.
"""


class MatchdayError(Exception):
    """Base exception for all domain errors."""

    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(MatchdayError):
    """A referenced document or external resource does not exist."""

    code = "NOT_FOUND"


class InvalidRequestError(MatchdayError):
    """Input is missing, malformed or not allowed in the current state."""

    code = "INVALID_REQUEST_BODY"


class AuthenticationError(MatchdayError):
    """Credentials or session are missing or wrong."""

    code = "UNAUTHORIZED_REQUEST"


class ConflictError(MatchdayError):
    """The operation conflicts with existing data or state."""

    code = "CONFLICT"
