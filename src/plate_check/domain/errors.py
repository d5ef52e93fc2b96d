"""Error types raised by the relay and the analysis session."""


class RelayError(Exception):
    """Base error for analysis relay failures with a user-facing message."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(RelayError):
    """Upstream model credentials are missing."""


class BadRequestError(RelayError):
    """Neither an image nor a food list was supplied."""

    status_code = 400


class RelayFailure(RelayError):
    """The upstream model call failed."""


class RelayTransportError(RelayError):
    """The relay endpoint could not be reached or returned a non-success status."""


class InvalidTransitionError(RuntimeError):
    """An analysis session operation was invoked in a state that forbids it."""
