"""Domain errors raised by the reporting and review services."""


class JourneyDeskError(Exception):
    """Base error carrying a stable code and the HTTP status the API maps it to."""

    status_code: int = 400

    def __init__(self, code: str, message: str | None = None):
        super().__init__(message or code)
        self.code = code

    def __str__(self) -> str:
        return self.args[0] if self.args else self.code


class ValidationError(JourneyDeskError):
    """Input rejected before any store call is made."""

    status_code = 422


class NotFoundError(JourneyDeskError):
    status_code = 404


class LinkCompletedError(JourneyDeskError):
    """A completed session link accepts no further transitions."""

    status_code = 409


class ConfirmationRequiredError(JourneyDeskError):
    status_code = 400


class BulkActionError(JourneyDeskError):
    """A bulk batch stopped at its first failing item.

    Items before the failure stay applied; `applied` is how many.
    """

    status_code = 500

    def __init__(self, code: str, applied: int, message: str | None = None):
        super().__init__(code, message)
        self.applied = applied
