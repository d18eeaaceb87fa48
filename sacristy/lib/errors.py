"""Domain exceptions raised by services and caught by admin controllers."""


class SacristyError(Exception):
    """Base class for errors that are reported back to the admin user."""


class EntityNotFoundError(SacristyError):
    """Raised when a record id does not exist."""

    def __init__(self, label: str, entity_id: object) -> None:
        super().__init__(f"{label} not found: {entity_id}")
        self.label = label
        self.entity_id = entity_id


class FormValidationError(SacristyError):
    """Raised when submitted form data is missing or malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ReorderError(SacristyError):
    """Raised when an order swap could not be persisted.

    The swap runs in one transaction, so neither record was changed.
    """


class UploadValidationError(SacristyError):
    """Raised when a file fails local type or size checks before upload."""


class MediaHostError(SacristyError):
    """Raised when the media host rejects or fails an upload."""
