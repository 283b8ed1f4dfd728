"""Error taxonomy shared by the budget, fetch and analysis layers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from headlinevibes.models import TokenCheckResult


class HeadlineVibesError(Exception):
    """Base class for every error raised by headlinevibes."""


class InvalidInputError(HeadlineVibesError, ValueError):
    """Raised for unparseable dates, malformed months or missing arguments."""


class ResourceExhaustedError(HeadlineVibesError):
    """Raised when the token budget blocks an operation.

    Carries the blocking check so callers can report how close to the
    allowance the month already is.
    """

    def __init__(self, message: str, check: TokenCheckResult, estimate: int) -> None:
        super().__init__(message)
        self.check = check
        self.estimate = estimate


class RateLimitedError(HeadlineVibesError):
    """Raised when the per-second or daily request cap is already reached."""


class ProviderError(HeadlineVibesError):
    """Raised when the news provider fails or returns an unexpected response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
