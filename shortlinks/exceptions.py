"""Service-level exceptions raised by the resolution service façade.

Every exception carries the HTTP status code and machine readable error code
the Lambda handlers respond with. Store-level failures live in
`shortlinks.dao.exceptions` and never leak past the façade.

Classes:
    ShortLinksError:
        Base class for all application-specific errors (500).
    ValidationError:
        Malformed input: bad URL, bad alias syntax, out-of-range expiry (400).
    UnauthenticatedError:
        The request carries no identity (401).
    ForbiddenError:
        Authenticated principal is not the owner of the record (403).
    NotFoundError:
        Identifier does not resolve to any record (404).
    ConflictError:
        Custom alias already taken (409).
    ExpiredError:
        Identifier resolves, but the record is past its expiry (410).
    ExhaustedRetriesError:
        No free shortcode found within the retry bound (500).
    StorageError:
        Data store fault below the façade (500).
    RecordingFailure:
        Visit recording failed. Always swallowed by the visit recorder.
    ConfigurationError:
        Application is misconfigured (500).
"""


class ShortLinksError(Exception):
    """Base exception for all application-specific errors."""

    status_code = 500
    error_code = 'app:shortlinks_error'


class ValidationError(ShortLinksError):
    """Raised when client input is malformed."""

    status_code = 400
    error_code = 'request:validation_error'


class UnauthenticatedError(ShortLinksError):
    """Raised when a request carries no principal identity."""

    status_code = 401
    error_code = 'auth:unauthenticated'


class ForbiddenError(ShortLinksError):
    """Raised when the principal does not own the requested record."""

    status_code = 403
    error_code = 'auth:forbidden'


class NotFoundError(ShortLinksError):
    """Raised when an identifier does not resolve to a record."""

    status_code = 404
    error_code = 'link:not_found'


class ConflictError(ShortLinksError):
    """Raised when a user supplied custom alias is already taken."""

    status_code = 409
    error_code = 'link:alias_conflict'


class ExpiredError(ShortLinksError):
    """Raised when an identifier resolves to an expired record."""

    status_code = 410
    error_code = 'link:expired'


class ExhaustedRetriesError(ShortLinksError):
    """Raised when shortcode generation keeps colliding past the retry bound."""

    error_code = 'link:exhausted_retries'


class StorageError(ShortLinksError):
    """Raised when the data store fails below the façade."""

    error_code = 'infra:storage_error'


class RecordingFailure(ShortLinksError):
    """Raised when a visit could not be recorded."""

    error_code = 'analytics:recording_failure'


class ConfigurationError(ShortLinksError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:configuration_error'
