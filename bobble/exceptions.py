"""
Exceptions raised at the boundaries of a detection session.
"""


class BobbleError(Exception):
    """Base exception for all bobble errors."""
    pass


class DeviceUnavailableError(BobbleError):
    """Raised when a sample source cannot be started."""

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        message = f"Sample source unavailable: {source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class StreamError(BobbleError):
    """Raised when a sample source fails after it has started."""
    pass


class InvalidArgumentError(BobbleError):
    """Raised when user input is rejected before a session starts."""
    pass


class ConfigError(BobbleError):
    """Raised when the configuration file is missing or malformed."""
    pass
