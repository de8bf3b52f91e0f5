from __future__ import annotations

from typing import Any


class FetchApiError(Exception):
    """Base error raised by do_fetch_api.

    `response` is the transport's response object when one was received,
    otherwise None.
    """

    def __init__(self, message: str, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.response = response


class TransportFailure(FetchApiError):
    """No response was received (DNS, connection refused, aborted...)."""


class HttpStatusFailure(FetchApiError):
    """A response arrived with a status outside 200-299."""

    @property
    def status_code(self) -> int:
        return self.response.status_code
