"""
Error types raised while resolving a human date/time.

Every error carries a short ``error`` code and a human-readable ``message``
so the transport layer can return them to the caller unchanged.
"""


class DateResolutionError(Exception):
    """Base class for all recoverable resolution failures."""

    error = "Date resolution failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class InputValidationError(DateResolutionError):
    """A required field is missing, empty or not a string."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.error = f"Missing or invalid '{field}' parameter"


class InvalidTimezoneError(DateResolutionError):
    error = "Invalid timezone"

    def __init__(self, time_zone) -> None:
        super().__init__(
            f"'{time_zone}' is not a valid IANA timezone. Please use a valid "
            "timezone like 'America/Chicago' or 'Europe/London'"
        )
        self.time_zone = time_zone


class InvalidReferenceInstantError(DateResolutionError):
    error = "Invalid clientCurrentTime format"

    def __init__(self, value) -> None:
        super().__init__(
            "Please provide a valid ISO datetime string (e.g., '2024-01-15T10:00:00Z')"
        )
        self.value = value


class DatePhraseUnresolvedError(DateResolutionError):
    error = "Could not parse the date"

    def __init__(self, phrase: str) -> None:
        super().__init__(f"Unable to understand the date: {phrase}")
        self.phrase = phrase


class TimePhraseUnresolvedError(DateResolutionError):
    error = "Could not parse the time"

    def __init__(self, phrase: str) -> None:
        super().__init__(f"Unable to understand the time: {phrase}")
        self.phrase = phrase


class InvalidResolvedInstantError(DateResolutionError):
    error = "Invalid date generated"

    def __init__(self, detail: str = "") -> None:
        message = "Could not generate a valid date from the provided inputs"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
