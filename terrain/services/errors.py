"""Errors raised by the team services.

Each carries the HTTP status the web layer answers with and a short message
that is safe to show to the caller.
"""


class TeamError(Exception):
    """Base exception for team and invitation errors."""

    status_code = 500

    def __init__(self, message: str = "Something went wrong.") -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(TeamError):
    status_code = 401

    def __init__(self, message: str = "Authentication required.") -> None:
        super().__init__(message)


class AuthorizationError(TeamError):
    status_code = 403

    def __init__(self, message: str = "Team plan required.") -> None:
        super().__init__(message)


class ValidationError(TeamError):
    status_code = 400

    def __init__(self, message: str = "Valid email address required.") -> None:
        super().__init__(message)


class ConflictError(TeamError):
    status_code = 409

    def __init__(self, message: str = "This email has already been invited.") -> None:
        super().__init__(message)


class CapacityError(TeamError):
    status_code = 403

    def __init__(self, message: str = "Team seat limit reached. Remove a member to invite someone new.") -> None:
        super().__init__(message)


class PersistenceError(TeamError):
    """A store write failed; the cause is logged, never returned."""

    status_code = 500


class RevocationError(TeamError):
    """No pending invitation matched; missing, foreign and settled rows look alike."""

    status_code = 500

    def __init__(self, message: str = "Failed to revoke invitation.") -> None:
        super().__init__(message)
