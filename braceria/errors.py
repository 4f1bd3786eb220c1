class BookingError(Exception):
    """Base class for failures surfaced by the booking workflow."""

    code = "BOOKING_ERROR"

    def __init__(self, message: str, code: str | None = None, details=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details


class ValidationError(BookingError):
    code = "VALIDATION_ERROR"


class ConflictError(BookingError):
    code = "UNAVAILABLE"


class NotFoundError(BookingError):
    code = "NOT_FOUND"


class StorageError(BookingError):
    code = "STORAGE_ERROR"


class NotifierError(BookingError):
    code = "NOTIFIER_ERROR"
