"""Console mirror of pipeline subtask events.

Only used for long-running actions (watch); one-shot actions stay quiet and
rely on the spinner's final line.
"""

from __future__ import annotations

from rich.console import Console

from .pipeline import EventKind, EventStream, PipelineEvent
from .supervisor import ProcessSupervisor, print_detail


class EventBridge:
    """Prints each pipeline event as a line on the console."""

    def __init__(self, console: Console, supervisor: ProcessSupervisor) -> None:
        self.console = console
        self.supervisor = supervisor

    def handle(self, event: PipelineEvent) -> None:
        if event.kind == EventKind.START:
            self.console.print(f"Starting '{event.subtask}'...", markup=False)
        elif event.kind == EventKind.STOP:
            self.console.print(f"Finished '{event.subtask}'", markup=False)
        elif event.kind == EventKind.ERROR:
            self.console.print(f"Error in: '{event.subtask}'", markup=False)
            if event.detail is not None:
                print_detail(self.console, event.detail)
            self.supervisor.request_exit(1)

    async def consume(self, events: EventStream) -> None:
        async for event in events:
            self.handle(event)


async def drain(events: EventStream) -> None:
    """Consume events without printing them."""
    async for _ in events:
        pass
