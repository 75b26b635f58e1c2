"""Run supervision: exit code bookkeeping and the uncaught-failure trap."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from rich.console import Console

from .errors import ChappeError, failure_detail
from .feedback import FeedbackReporter

log = logging.getLogger(__name__)


def exit_code_for(error: BaseException) -> int:
    """Exit code for a fatal error: its own for chappe errors, else 1."""
    if isinstance(error, ChappeError):
        return error.exit_code
    return 1


def print_detail(console: Console, detail: Any) -> None:
    """Print a failure detail: exceptions as 'Type: message', data pretty."""
    if isinstance(detail, BaseException):
        console.print(
            f"{type(detail).__name__}: {detail}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
    else:
        console.print(detail, markup=False, soft_wrap=True)


class ProcessSupervisor:
    """Owns the pipeline task and the exit code of a run.

    The exit code is set at most once, by whichever handler first sees a
    fatal condition. A non-zero code cancels the supervised task so the run
    ends even if the pipeline still holds watchers or pending work.
    """

    def __init__(self, reporter: FeedbackReporter, console: Console) -> None:
        self.reporter = reporter
        self.console = console
        self.exit_code: Optional[int] = None
        self._task: Optional[asyncio.Task[Any]] = None

    def arm(self, loop: asyncio.AbstractEventLoop) -> None:
        """Route failures from stray tasks on loop to the trap."""
        loop.set_exception_handler(self._handle_loop_exception)

    def supervise(self, task: asyncio.Task[Any]) -> None:
        self._task = task
        if self.exit_code:
            task.cancel()

    def request_exit(self, code: int) -> None:
        if self.exit_code is not None:
            log.debug(f"Exit code already set to {self.exit_code}, ignoring {code}")
            return

        self.exit_code = code
        if code > 0 and self._task is not None and not self._task.done():
            log.info(f"Exit code {code} requested, cancelling pipeline")
            self._task.cancel()

    def trap(self, error: BaseException) -> None:
        """Handle a failure that escaped every other handler."""
        log.debug("Uncaught failure", exc_info=error)
        self.reporter.fail("Failed:")
        print_detail(self.console, failure_detail(error))
        self.request_exit(exit_code_for(error))

    def _handle_loop_exception(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        error = context.get("exception")
        if error is None:
            # Housekeeping messages such as "Task was destroyed but it is pending!"
            loop.default_exception_handler(context)
            return
        self.trap(error)
