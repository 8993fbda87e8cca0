"""
Application errors.

Every error carries an HTTP status and a stable machine-readable code so the
API layer can map it without inspecting the message.
"""


class AppError(Exception):
    """Base class for application errors."""

    code = "app_error"

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(AppError):
    """Raised when a ticket request is rejected at admission."""

    code = "validation_error"

    def __init__(self, message: str = "Invalid ticket request", status_code: int = 400):
        super().__init__(message, status_code=status_code)


class MissingField(ValidationError):
    """A required field is absent, null or empty."""

    code = "missing_field"

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class InvalidName(ValidationError):
    code = "invalid_name"

    def __init__(self, message: str = "Name must be a non-empty text"):
        super().__init__(message)


class InvalidAge(ValidationError):
    code = "invalid_age"

    def __init__(self, message: str = "Age must be a number between 1 and 120"):
        super().__init__(message)


class InvalidClass(ValidationError):
    code = "invalid_class"

    def __init__(self, allowed: list[str]):
        self.allowed = allowed
        super().__init__(
            f"Invalid ticket type. Allowed types are: {', '.join(allowed)}"
        )


class PriorityAgeTooLow(ValidationError):
    code = "priority_age_too_low"

    def __init__(self, min_age: int):
        super().__init__(f"Priority tickets are only for people older than {min_age}")


class VipCredentialRejected(ValidationError):
    code = "vip_credential_rejected"

    def __init__(self, message: str = "A valid VIP code is required for VIP tickets"):
        super().__init__(message, status_code=403)


class TicketNotFound(AppError):
    """Raised when a lookup targets an id that is not waiting in any queue."""

    code = "ticket_not_found"

    def __init__(self, ticket_id: int):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} not found", status_code=404)


class PersistenceFailure(AppError):
    """
    Raised when the snapshot cannot be written.

    The mutation that triggered the write is not applied in memory.
    """

    code = "persistence_failure"

    def __init__(self, message: str = "Queue state could not be persisted"):
        super().__init__(message, status_code=503)
