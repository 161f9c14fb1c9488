"""Domain-specific exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""

    pass


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    pass


class EntityValidationError(ValidationError):
    """Raised when an entity is constructed with missing or invalid fields.

    ``violations`` holds the (field, reason) pairs found on the rejected
    instance.
    """

    def __init__(self, message: str, violations: list[tuple[str, str]] | None = None):
        super().__init__(message)
        self.violations = violations or []


class UnknownEntityKindError(DomainError, ValueError):
    """Raised when a kind name does not select a known entity type."""

    pass
