"""
Error taxonomy for the stores.

Every error here is recoverable: the HTTP layer maps each class to a status
code (see tinyurl_app.api.errors). Broken internal invariants are raised as
AssertionError instead and are never mapped.
"""


class TinyURLError(Exception):
    """Base class for all store errors"""

    default_message = "Request failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidInputError(TinyURLError):
    """A required field is missing or empty"""

    default_message = "Missing required field"


class DuplicateEmailError(TinyURLError):
    """An account with this email already exists"""

    default_message = "That email has already been registered"


class InvalidCredentialsError(TinyURLError):
    """Unknown email or wrong password (deliberately indistinguishable)"""

    default_message = "Email or password is incorrect"


class NotFoundError(TinyURLError):
    """The short code (or account) does not exist"""

    default_message = "Short URL not found"


class UnauthorizedError(TinyURLError):
    """No session: the requester is anonymous"""

    default_message = "Must be logged in"


class ForbiddenError(TinyURLError):
    """Session present, but the requester does not own the mapping"""

    default_message = "This short URL isn't available"


class CapacityExceededError(TinyURLError):
    """No free short code could be found"""

    default_message = "Could not allocate a short code"
