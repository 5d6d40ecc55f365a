"""
Domain Error Taxonomy

Business-rule failures raised by the domain and application layers.
Each error carries a machine-readable code and the HTTP status the API
layer answers with.
"""


class DomainError(Exception):
    """Base class for expected business-rule failures."""

    code = 'DOMAIN_ERROR'
    status_code = 400
    default_message = 'Request could not be completed'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(DomainError):
    """No valid caller identity."""

    code = 'UNAUTHENTICATED'
    status_code = 401
    default_message = 'Not authenticated'


class AuthorizationError(DomainError):
    """Caller is known but lacks permission on the target resource."""

    code = 'FORBIDDEN'
    status_code = 403
    default_message = 'Not authorized'


class NotFoundError(DomainError):
    code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Not found'


class ValidationError(DomainError):
    """Malformed input or a violated data invariant."""

    code = 'VALIDATION_ERROR'
    status_code = 400
    default_message = 'Invalid input'


class ConflictError(DomainError):
    """The requested dates collide with an existing active booking."""

    code = 'CONFLICT'
    status_code = 409
    default_message = 'Property is not available for these dates'


class InvalidStateError(DomainError):
    """Lifecycle transition not permitted from the current state."""

    code = 'INVALID_STATE'
    status_code = 409
    default_message = 'Operation not allowed in the current state'
