"""Task orchestration: one run of one action against the pipeline.

This module handles:
1. Selecting the action from the command-line tokens
2. Resolving the build context
3. Arming the supervisor and, for long-running actions, the event bridge
4. Running the pipeline action as a supervised task
5. Reporting the outcome through the spinner and the exit code
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Optional

from rich.console import Console

from .actions import Action, is_logging_action, select_action
from .banner import describe_run, render_banner
from .context import ResolvedContext, resolve_context
from .errors import PipelineError
from .events import EventBridge, drain
from .feedback import FeedbackReporter
from .pipeline import EventStream, Pipeline, load_pipeline
from .supervisor import ProcessSupervisor, exit_code_for, print_detail

log = logging.getLogger(__name__)


class TaskOrchestrator:
    """Runs a single chappe action and returns its exit code."""

    def __init__(
        self,
        console: Console,
        pipeline: Optional[Pipeline] = None,
        pipeline_ref: Optional[str] = None,
        quiet: bool = False,
    ) -> None:
        self.console = console
        self.pipeline = pipeline
        self.pipeline_ref = pipeline_ref
        self.quiet = quiet
        self.reporter = FeedbackReporter(console)
        self.supervisor = ProcessSupervisor(self.reporter, console)
        self.context: Optional[ResolvedContext] = None

    def run(
        self,
        tokens: Iterable[str],
        overrides: Mapping[str, Optional[str]],
        example: Optional[str] = None,
    ) -> int:
        action = select_action(tokens)
        log.info(f"Selected action: {action.value}")

        if not self.quiet:
            self.console.print(
                render_banner(), markup=False, highlight=False, soft_wrap=True
            )

        return asyncio.run(self._run(action, overrides, example))

    async def _run(
        self,
        action: Action,
        overrides: Mapping[str, Optional[str]],
        example: Optional[str],
    ) -> int:
        self.supervisor.arm(asyncio.get_running_loop())
        try:
            await self._execute(action, overrides, example)
        except Exception as error:
            self.supervisor.trap(error)
        finally:
            self.reporter.close()
        return self.supervisor.exit_code or 0

    async def _execute(
        self,
        action: Action,
        overrides: Mapping[str, Optional[str]],
        example: Optional[str],
    ) -> None:
        self.context = resolve_context(overrides, example)

        if not self.quiet:
            self.console.print(
                describe_run(action, self.context.as_dict()),
                markup=False,
                highlight=False,
                soft_wrap=True,
            )

        pipeline = self.pipeline or load_pipeline(self.pipeline_ref)

        events = EventStream()
        if is_logging_action(action):
            bridge = EventBridge(self.console, self.supervisor)
            listener = asyncio.create_task(bridge.consume(events))
        else:
            listener = asyncio.create_task(drain(events))

        self.reporter.start()

        task = asyncio.create_task(pipeline.run(action, self.context, events))
        self.supervisor.supervise(task)

        error: Optional[PipelineError] = None
        try:
            await task
        except PipelineError as e:
            error = e
        except asyncio.CancelledError:
            # Only swallow cancellations the supervisor asked for
            if self.supervisor.exit_code is None:
                raise
        finally:
            events.close()
            await listener

        if error is not None:
            self.reporter.fail("Error:")
            print_detail(self.console, error)
            self.supervisor.request_exit(exit_code_for(error))
        elif self.supervisor.exit_code:
            self.reporter.fail("Error:")
        else:
            self.reporter.succeed(action)
            self.supervisor.request_exit(0)
