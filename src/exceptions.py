"""Business exceptions for YouTube Search Proxy."""

from typing import Any


class UpstreamError(Exception):
    """Raised when the YouTube Data API call fails or returns an error body.

    `payload` is the JSON body handed back to the caller as-is.
    """

    def __init__(
        self,
        message: str,
        payload: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"error": {"message": message}}
        super().__init__(message)


class InvalidArgument(Exception):
    """Raised when a request lacks required identifiers or exceeds batch limits."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
