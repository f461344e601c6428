class AppError(Exception):
    """Base class for errors raised by the service layer."""


class ValidationError(AppError, ValueError):
    """Malformed or inconsistent input. Nothing has been persisted."""


class NotFoundError(AppError, LookupError):
    """A referenced entity is absent or disabled."""


class ConflictError(AppError):
    """A uniqueness rule would be violated."""
