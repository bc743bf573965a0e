"""Domain error kinds raised across the service boundary"""


class MapJournalError(Exception):
    """Base class for all errors raised by mapjournal"""

    default_message = "Operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(MapJournalError):
    """No row matched the (id, owner) pair.

    Raised identically for rows that do not exist and rows owned by someone else.
    """

    default_message = "Resource not found"


class ValidationError(MapJournalError):
    default_message = "Invalid input"


class ConflictError(MapJournalError):
    default_message = "Resource already exists"


class PersistenceError(MapJournalError):
    """Unexpected storage failure. Driver details are chained, not in the message."""

    default_message = "Storage operation failed"


class InternalError(MapJournalError):
    default_message = "Internal error"
