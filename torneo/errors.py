class TorneoError(Exception):
    """Base class for errors raised by the tournament services."""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFoundError(TorneoError):
    """A tournament, date or match does not exist."""

    status_code = 404


class ValidationError(TorneoError):
    """The requested mutation is not allowed for the current state."""

    status_code = 400


class InvariantViolation(TorneoError):
    """Internal consistency check failed. Indicates a bug, not bad input."""

    status_code = 500
