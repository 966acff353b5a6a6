"""Error kinds raised by the couch connector.

Every error carries an optional numeric ``code`` which, for errors caused by a
server response, is the HTTP status of that response.
"""


class CouchError(Exception):
    """Base class of all couch connector errors."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


############### URL VALIDATION ###############
class InvalidNameError(CouchError, ValueError):
    """The database name does not match the allowed name grammar."""


class InvalidHostError(CouchError, ValueError):
    """The host is not a valid DNS name or IPv4 address."""


class InvalidPortError(CouchError, ValueError):
    """The port is not numeric or outside 1-65535."""


############### SERVER RESPONSES ###############
class NotFoundError(CouchError):
    def __init__(self, message: str, code: int = 404):
        super().__init__(message, code)


class RevisionConflictError(CouchError):
    """The document was changed on the server since the given revision was read."""

    def __init__(self, message: str = "Cannot save updated document: revision conflict", code: int = 409):
        super().__init__(message, code)


class AlreadyExistsError(CouchError):
    def __init__(self, message: str, code: int = 409):
        super().__init__(message, code)


class ViewNotFoundError(CouchError):
    """The server answers a missing view with a generic 500 error."""

    def __init__(self, message: str, code: int = 500):
        super().__init__(message, code)


class UnexpectedResponseError(CouchError):
    """Any other non-success status. Carries the status and the server's status message."""

    def __init__(self, status: int, status_message: str = ""):
        super().__init__(f"Unexpected response from server: {status} {status_message}".rstrip(), status)
        self.status = status
        self.status_message = status_message


############### CALLER ERRORS ###############
class TypeMismatchError(CouchError, TypeError):
    """A document class passed to retrieve() does not extend Document."""


class InvalidArgumentError(CouchError, ValueError):
    """An operation was called with data it cannot work with, e.g. an update without a revision."""
