"""Shared error handling for chappecli."""

from typing import Any, Optional


class ChappeError(Exception):
    """Base exception for chappe operations."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigurationError(ChappeError):
    """Raised when the build context cannot be resolved."""


class PipelineError(ChappeError):
    """Raised by a pipeline action to report that it completed with an error.

    `context` carries the most specific detail the pipeline has about the
    failure (e.g. the lint report).
    """

    def __init__(
        self, message: str, context: Optional[Any] = None, exit_code: int = 1
    ) -> None:
        self.context = context
        super().__init__(message, exit_code=exit_code)


def failure_detail(error: BaseException) -> Any:
    """Return the most specific detail attached to a failure."""
    context = getattr(error, "context", None)
    if context:
        return context
    return error

