"""Build pipeline contract.

The pipeline does the actual work: it turns the documentation sources named
by the context into static assets. chappecli only knows how to call it:

- one coroutine per action (clean, build, lint, watch)
- each receives the resolved context and an event stream
- returning means the action completed
- raising PipelineError means it completed with an error
- anything else raised is an uncaught failure

Pipelines are located by a `module:attribute` reference, or through the
`chappe.pipelines` entry point group when no reference is given.
"""

from __future__ import annotations

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from importlib import metadata
from typing import Any, AsyncIterator, Iterable, Optional

from .actions import Action
from .context import ResolvedContext
from .errors import ConfigurationError

log = logging.getLogger(__name__)

PIPELINE_GROUP = "chappe.pipelines"
PIPELINE_ENV_VAR = "CHAPPE_PIPELINE"


class EventKind(str, Enum):
    START = "start"
    STOP = "stop"
    ERROR = "error"


@dataclass(frozen=True)
class PipelineEvent:
    """A lifecycle notification about one pipeline subtask."""

    kind: EventKind
    subtask: str
    detail: Any = None


_CLOSED = object()


class EventStream:
    """Stream of lifecycle events from the pipeline to the CLI.

    Once closed, further events are dropped: nothing is reported for a run
    after its action completed.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self.closed = False

    def emit(self, kind: EventKind, subtask: str, detail: Any = None) -> None:
        if self.closed:
            log.debug(f"Dropping {kind.value} event for '{subtask}' after close")
            return
        self._queue.put_nowait(PipelineEvent(kind=kind, subtask=subtask, detail=detail))

    def start(self, subtask: str) -> None:
        self.emit(EventKind.START, subtask)

    def stop(self, subtask: str) -> None:
        self.emit(EventKind.STOP, subtask)

    def error(self, subtask: str, detail: Any = None) -> None:
        self.emit(EventKind.ERROR, subtask, detail)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[PipelineEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


class Pipeline(ABC):
    """Base class for build pipelines."""

    @abstractmethod
    async def clean(self, context: ResolvedContext, events: EventStream) -> None:
        """Remove build output and temporary files."""
        ...

    @abstractmethod
    async def build(self, context: ResolvedContext, events: EventStream) -> None:
        """Build the documentation into context.dist."""
        ...

    @abstractmethod
    async def lint(self, context: ResolvedContext, events: EventStream) -> None:
        """Check the documentation sources."""
        ...

    @abstractmethod
    async def watch(self, context: ResolvedContext, events: EventStream) -> None:
        """Rebuild on source changes. Not expected to return."""
        ...

    async def run(
        self, action: Action, context: ResolvedContext, events: EventStream
    ) -> None:
        """Run the coroutine named after action."""
        await getattr(self, action.value)(context, events)


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=PIPELINE_GROUP)


def _find_entry_point(ref: Optional[str]) -> metadata.EntryPoint:
    ref = ref or os.environ.get(PIPELINE_ENV_VAR)
    if ref:
        return metadata.EntryPoint(name="pipeline", value=ref, group=PIPELINE_GROUP)

    for entry_point in _iter_entry_points():
        return entry_point

    raise ConfigurationError(
        "No build pipeline found. Install one, or pass --pipeline "
        f"(or set {PIPELINE_ENV_VAR}) to a 'module:attribute' reference."
    )


def load_pipeline(ref: Optional[str] = None) -> Pipeline:
    """Load the pipeline named by ref, the environment, or an entry point.

    The referenced attribute may be a Pipeline instance, or a class or
    factory returning one when called without arguments.

    Raises:
        ConfigurationError: If no pipeline can be found or loaded.
    """
    entry_point = _find_entry_point(ref)
    log.info(f"Loading pipeline from {entry_point.value}")

    try:
        target = entry_point.load()
    except (ImportError, AttributeError, ValueError) as e:
        raise ConfigurationError(
            f"Could not load pipeline '{entry_point.value}': {e}"
        ) from e

    pipeline = target if isinstance(target, Pipeline) else None
    if pipeline is None and callable(target):
        pipeline = target()

    if not isinstance(pipeline, Pipeline):
        raise ConfigurationError(
            f"'{entry_point.value}' does not provide a Pipeline"
        )
    return pipeline
