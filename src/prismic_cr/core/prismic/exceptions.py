"""Errors raised by the Prismic HTTP client."""


class PrismicApiError(Exception):
    """Base class for Prismic client errors."""


class ApiRequestError(PrismicApiError):
    """Raised when the endpoint answers with an HTTP error status.

    Attributes:
        status_code: HTTP status returned by the endpoint.
        url: Requested URL.
    """

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Request to {url} failed with HTTP {status_code}")


class ApiConnectionError(PrismicApiError):
    """Raised when the endpoint cannot be reached (DNS, connect, timeout)."""


class ApiResponseError(PrismicApiError):
    """Raised when the endpoint answers with a payload we cannot read."""
