"""Domain-specific exceptions"""


class CirculationError(Exception):
    """Base exception for the circulation client"""

    pass


class NotAuthenticatedError(CirculationError):
    """No active session when one is required"""

    def __init__(self, message: str = "No authenticated session found"):
        super().__init__(message)
        self.message = message


class RemoteError(CirculationError):
    """Catalog API returned a non-success status or could not be reached"""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class InvalidResponseError(RemoteError):
    """Catalog API returned a success status with a malformed body"""

    pass


class InvalidInputError(CirculationError):
    """Caller passed a value outside the operation's domain"""

    pass
