"""Spinner feedback for a run.

The reporter shows a spinner while the pipeline works and turns it into a
single success or failure line once the action completes. Long-running
actions (watch) never complete: their success rule restarts the spinner
with a new message instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

from rich.console import Console
from rich.status import Status

from .actions import Action

log = logging.getLogger(__name__)


class SpinnerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SuccessRule:
    """How the spinner ends when an action completes without error."""

    method: Literal["succeed", "start"]
    text: str


DEFAULT_RULE = SuccessRule("succeed", "Success!")

SPINNER_SUCCESSES: dict[Action, SuccessRule] = {
    Action.CLEAN: SuccessRule("succeed", "Cleaned up."),
    Action.BUILD: SuccessRule("succeed", "Build done!"),
    Action.LINT: SuccessRule("succeed", "Lint passed."),
    Action.WATCH: SuccessRule("start", "Watching..."),
}


def success_rule(action: Action) -> SuccessRule:
    return SPINNER_SUCCESSES.get(action, DEFAULT_RULE)


class FeedbackReporter:
    """Drives a rich spinner through idle -> running -> succeeded | failed."""

    def __init__(
        self, console: Console, text: str = "Working...", color: str = "cyan"
    ) -> None:
        self.console = console
        self.text = text
        self.color = color
        self.state = SpinnerState.IDLE
        self._status: Optional[Status] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (SpinnerState.SUCCEEDED, SpinnerState.FAILED)

    def start(self, text: Optional[str] = None) -> None:
        """Show the spinner, or change its message if already shown."""
        if self.is_terminal:
            log.debug(f"Spinner already {self.state.value}, not restarting")
            return

        self.text = text or self.text
        if self._status is None:
            self._status = self.console.status(
                self.text, spinner="dots", spinner_style=self.color
            )
            self._status.start()
        else:
            self._status.update(self.text)
        self.state = SpinnerState.RUNNING

    def succeed(self, action: Action) -> None:
        """Apply the success rule for action."""
        rule = success_rule(action)
        if rule.method == "start":
            self.start(rule.text)
        else:
            self._finish(SpinnerState.SUCCEEDED, f"[green]✔[/green] {rule.text}")

    def fail(self, label: str) -> None:
        self._finish(SpinnerState.FAILED, f"[red]✖[/red] {label}")

    def close(self) -> None:
        """Stop rendering the spinner, leaving the state untouched."""
        if self._status is not None:
            self._status.stop()
            self._status = None

    def _finish(self, state: SpinnerState, line: str) -> None:
        if self.is_terminal:
            log.debug(f"Spinner already {self.state.value}, ignoring {state.value}")
            return

        self.close()
        self.state = state
        self.console.print(line)
