"""Exception hierarchy for the FishEye client."""


class FisheyeClientError(Exception):
    """Raised when a FishEye API call fails.

    Wraps httpx transport errors and undecodable responses for consistent
    error handling.
    """

    pass


class InvalidArgumentError(FisheyeClientError, ValueError):
    """Raised before any network call when a required setting is missing.

    Attributes:
        argument: Name of the missing setting (e.g. "username")
    """

    def __init__(self, argument: str, message: str | None = None):
        self.argument = argument
        super().__init__(message or f"Invalid or missing argument: {argument}")


class FisheyeTransportError(FisheyeClientError):
    """Raised when the server answers with an unexpected status code.

    Attributes:
        status_code: HTTP status returned by the server
    """

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"Unexpected HTTP status {status_code}")
