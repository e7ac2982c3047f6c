"""Typed failures raised by text-completion capabilities."""

from typing import Optional


class CompletionFailure(Exception):
    """Base class for every completion-related failure."""


class CompletionUnavailable(CompletionFailure):
    """The completion capability is not configured (e.g. missing API key)."""


class CompletionError(CompletionFailure):
    """A completion call was attempted and failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retry_after: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after
