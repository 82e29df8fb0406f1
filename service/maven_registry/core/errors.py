# service/maven_registry/core/errors.py
"""
Error taxonomy for the registry.

Each error maps to exactly one HTTP status. The application installs a
handler that renders them as ``{"message": "<status> <text>"}``.
"""


class RegistryError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def render(self) -> str:
        return f"{self.status_code} {self.message}"


class BadRequestError(RegistryError):
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(RegistryError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(RegistryError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(RegistryError):
    status_code = 404
    default_message = "Not Found"


class ConflictError(RegistryError):
    status_code = 409
    default_message = "Conflict"


class StoreUnavailableError(RegistryError):
    """Backing store or blob storage I/O failed; safe to retry."""

    status_code = 503
    default_message = "Storage unavailable"
    retry_after_s = 5
