"""
Error kinds returned by the organization and document operations.

Every operation either succeeds or raises exactly one of these. The transport
layer maps them to status codes through ``kind`` and ``status_code``.
"""


class DocsError(Exception):
    """Base class for all domain errors."""

    kind = "internal"
    status_code = 500

    def __init__(self, detail: str = "Internal error"):
        super().__init__(detail)
        self.detail = detail


class Unauthenticated(DocsError):
    kind = "unauthenticated"
    status_code = 401

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)


class Forbidden(DocsError):
    kind = "forbidden"
    status_code = 403


class NoMembership(Forbidden):
    kind = "forbidden:no-membership"

    def __init__(self, detail: str = "You are not a member of this organization"):
        super().__init__(detail)


class InsufficientPermission(Forbidden):
    kind = "forbidden:insufficient-permission"

    def __init__(self, detail: str = "Your role does not allow this action"):
        super().__init__(detail)


class NotFound(DocsError):
    kind = "not_found"
    status_code = 404


class ValidationError(DocsError):
    kind = "validation_error"
    status_code = 400


class ConflictError(DocsError):
    kind = "conflict"
    status_code = 409


class InternalError(DocsError):
    pass
