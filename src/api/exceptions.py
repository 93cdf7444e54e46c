"""Exception hierarchy for the Printyx API client."""

from __future__ import annotations


class ApiError(Exception):
    """Base exception for all API client errors."""


class FetchError(ApiError):
    """A read request failed: network error or non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiParseError(FetchError):
    """The endpoint answered but the body was not the expected JSON shape."""


class ApiNotConnectedError(ApiError):
    """A request was issued before ``connect()`` or after ``close()``."""
