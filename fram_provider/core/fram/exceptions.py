"""FRAM-specific exceptions for error handling."""


class FramError(Exception):
    """Base exception for all FRAM operations."""
    pass


class FramAPIError(FramError):
    """HTTP error from the AM or IDM REST API.

    Attributes:
        status_code: HTTP status code
        body: Raw response body
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, body: str, endpoint: str):
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        super().__init__(f"status: {status_code}, body: {body}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_already_exists(self) -> bool:
        """AM answers 409 when a realm service is already configured."""
        return self.status_code == 409


class AuthenticationError(FramError):
    """Login against AM failed or returned no session token."""
    pass


class NotFoundError(FramError):
    """Requested object does not exist."""
    pass


class AlreadyExistsError(FramError):
    """Object creation failed - an object with this id already exists."""
    pass


class FramConnectionError(FramError):
    """AM or IDM could not be reached."""
    pass


class InvalidResponseError(FramAPIError):
    """Successful status, but the body is not the expected JSON document."""

    def __str__(self) -> str:
        return f"unexpected response from {self.endpoint} (status: {self.status_code}): {self.body[:200]}"
