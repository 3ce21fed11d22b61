"""Domain semantic exceptions."""


class DomainError(Exception):
    """Base domain exception."""

    code = "DOMAIN_ERROR"


class NotFoundError(DomainError):
    """Referenced resource is missing or owned by another user."""

    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: object = None, message: str | None = None):
        self.resource = resource
        self.identifier = identifier
        if message is None:
            if identifier is None:
                message = f"{resource} not found"
            else:
                message = f"{resource} '{identifier}' not found"
        super().__init__(message)


class BadRequestError(DomainError):
    """Raised when a request would break a trip or stop invariant."""

    code = "BAD_REQUEST"


class ConflictError(DomainError):
    """Raised when a user-scoped identifier is already taken."""

    code = "CONFLICT"
