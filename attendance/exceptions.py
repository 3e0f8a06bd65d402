"""Application exceptions."""


class AppError(Exception):
    """Base exception for application errors."""


class ModelError(AppError):
    """Base exception for model/database operations."""


class RecordNotFoundError(ModelError):
    """Raised when a record is not found in the database."""

    def __init__(self, model_name: str, record_id: str):
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"{model_name} with id={record_id} not found")


class DatabaseConnectionError(ModelError):
    """Raised when database connection fails."""


class InvalidFieldError(ModelError):
    """Raised when a field cannot be edited or receives an invalid value."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {reason}")


class InvalidTargetError(AppError):
    """Raised when a target percentage cannot be projected or advised on."""

    def __init__(self, target: int, allowed: tuple[int, ...] = ()):
        self.target = target
        self.allowed = allowed
        if allowed:
            message = (
                f"Unsupported target {target}%. "
                f"Allowed: {', '.join(f'{t}%' for t in allowed)}"
            )
        else:
            message = f"Target {target}% must be at least 0 and below 100"
        super().__init__(message)


class AuthenticationError(AppError):
    """Raised when an anonymous identity cannot be established."""


class StoreUnavailableError(AppError):
    """Raised when the attendance store failed to initialize."""


class RedisConnectionError(AppError):
    """Raised when Redis connection fails."""


class SubscriptionError(AppError):
    """Raised when the subject feed cannot be read."""
