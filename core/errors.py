"""
Error kinds raised by the blog core and the record store.
Every error carries a human-readable message and the HTTP status the
API layer answers with.
"""


class BlogError(Exception):
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(BlogError):
    """Empty comment body, missing or malformed submission fields."""
    status_code = 400


class AuthorizationError(BlogError):
    """The actor lacks the rights for the requested action."""
    status_code = 403


class NotFoundError(BlogError):
    """A referenced blog, comment, category or profile is absent."""
    status_code = 404


class InvalidTransitionError(BlogError):
    """The lifecycle action is not legal from the current status."""
    status_code = 409


class CollaboratorError(BlogError):
    """Opaque failure from the record store (I/O, constraint violation)."""
    status_code = 502
