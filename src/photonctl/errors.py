from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


class PhotonError(Exception):
    """Base error type for photonctl."""


class ConfigError(PhotonError):
    """Raised when configuration cannot be loaded, validated, or is incomplete."""


class NotFoundError(PhotonError):
    """Raised when a name lookup does not resolve to exactly one resource."""


class InvalidArgumentError(PhotonError, ValueError):
    """Raised when a caller passes an argument the API would reject, such as an empty id."""


class RequestError(PhotonError):
    """Raised when an HTTP request fails after retries."""


@dataclass(slots=True)
class APIError(RequestError):
    """Represents a non-success Photon Controller API response."""

    status_code: int
    message: str
    code: str | None = None
    body: str | None = None
    payload: dict[str, Any] | None = field(default=None, repr=False)

    def __str__(self) -> str:
        label = f"HTTP {self.status_code}"
        if self.code:
            label = f"{label} {self.code}"
        if self.body:
            return f"{label}: {self.message} ({self.body})"
        return f"{label}: {self.message}"


class WaitError(PhotonError):
    """Base error for waits on tasks and resources that did not succeed."""

    def __init__(self, message: str, *, api_errors: Sequence[Any] = ()) -> None:
        self.api_errors = list(api_errors)
        if self.api_errors:
            rendered = ", ".join(str(item) for item in self.api_errors)
            message = f"{message}\nAPI Errors: {rendered}"
        super().__init__(message)


class TaskFailedError(WaitError):
    """The watched task or resource reported an ERROR state."""


class WaitTimeoutError(WaitError):
    """The watched task or resource did not reach a terminal state in time."""


class FetchRetriesExhaustedError(WaitError):
    """Too many consecutive failures fetching the watched task or resource."""
