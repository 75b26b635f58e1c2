import asyncio
import io
import sys

import pytest
from rich.console import Console

from chappecli.lib.errors import PipelineError
from chappecli.lib.pipeline import Pipeline


class FakePipeline(Pipeline):
    """Pipeline double that records calls and plays back a scripted outcome.

    outcome:
      - "ok": complete without error
      - "error": raise PipelineError
      - "crash": raise an unrelated exception
      - "hang": never complete
      - "interrupt": raise KeyboardInterrupt, as Ctrl-C does
    """

    def __init__(self, outcome="ok", events=(), error_context=None, exit_code=1):
        self.outcome = outcome
        self.exit_code = exit_code
        self.scripted_events = list(events)
        self.error_context = error_context
        self.calls = []
        self.contexts = []
        self.cancelled = False

    async def _act(self, name, context, events):
        self.calls.append(name)
        self.contexts.append(context)
        try:
            await self._play(events)
        except asyncio.CancelledError:
            self.cancelled = True
            raise

    async def _play(self, events):
        for kind, subtask, *detail in self.scripted_events:
            getattr(events, kind)(subtask, *detail)
            await asyncio.sleep(0)

        if self.outcome == "error":
            raise PipelineError(
                "markdown compile failed",
                context=self.error_context,
                exit_code=self.exit_code,
            )
        if self.outcome == "crash":
            error = RuntimeError("boom")
            if self.error_context is not None:
                error.context = self.error_context
            raise error
        if self.outcome == "hang":
            await asyncio.sleep(3600)
        if self.outcome == "interrupt":
            raise KeyboardInterrupt

    async def clean(self, context, events):
        await self._act("clean", context, events)

    async def build(self, context, events):
        await self._act("build", context, events)

    async def lint(self, context, events):
        await self._act("lint", context, events)

    async def watch(self, context, events):
        await self._act("watch", context, events)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def console(output):
    return Console(file=output, force_terminal=False, width=300)


@pytest.fixture
def pipeline_module(tmp_path, monkeypatch):
    """Write an importable pipeline module and return its name."""
    name = "recording_pipeline"
    (tmp_path / f"{name}.py").write_text(
        "from chappecli.lib.errors import PipelineError\n"
        "from chappecli.lib.pipeline import Pipeline\n"
        "\n"
        "CALLS = []\n"
        "\n"
        "\n"
        "class RecordingPipeline(Pipeline):\n"
        "    def __init__(self, fail=False):\n"
        "        self.fail = fail\n"
        "\n"
        "    async def _act(self, name, context):\n"
        "        CALLS.append((name, context))\n"
        "        if self.fail:\n"
        "            raise PipelineError('lint found 3 problems')\n"
        "\n"
        "    async def clean(self, context, events):\n"
        "        await self._act('clean', context)\n"
        "\n"
        "    async def build(self, context, events):\n"
        "        await self._act('build', context)\n"
        "\n"
        "    async def lint(self, context, events):\n"
        "        await self._act('lint', context)\n"
        "\n"
        "    async def watch(self, context, events):\n"
        "        await self._act('watch', context)\n"
        "\n"
        "\n"
        "pipeline = RecordingPipeline()\n"
        "failing = RecordingPipeline(fail=True)\n"
        "not_a_pipeline = object()\n"
        "\n"
        "\n"
        "def make_failing():\n"
        "    return RecordingPipeline(fail=True)\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, name, raising=False)
    monkeypatch.delenv("CHAPPE_PIPELINE", raising=False)
    return name
