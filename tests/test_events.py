"""Tests for pipeline events and the console bridge."""

import asyncio

from chappecli.lib.events import EventBridge, drain
from chappecli.lib.feedback import FeedbackReporter
from chappecli.lib.pipeline import EventKind, EventStream, PipelineEvent
from chappecli.lib.supervisor import ProcessSupervisor


def make_bridge(console):
    supervisor = ProcessSupervisor(FeedbackReporter(console), console)
    return EventBridge(console, supervisor), supervisor


class TestEventStream:
    def test_yields_events_until_closed(self):
        async def scenario():
            events = EventStream()
            events.start("markdown")
            events.stop("markdown")
            events.close()
            return [event async for event in events]

        received = asyncio.run(scenario())
        assert received == [
            PipelineEvent(EventKind.START, "markdown"),
            PipelineEvent(EventKind.STOP, "markdown"),
        ]

    def test_events_after_close_dropped(self):
        async def scenario():
            events = EventStream()
            events.close()
            events.error("late", "too late")
            return [event async for event in events]

        assert asyncio.run(scenario()) == []

    def test_drain_consumes_silently(self, output):
        async def scenario():
            events = EventStream()
            events.start("search-index")
            events.close()
            await drain(events)

        asyncio.run(scenario())
        assert output.getvalue() == ""


class TestEventBridge:
    def test_start_and_stop_lines(self, console, output):
        bridge, supervisor = make_bridge(console)
        bridge.handle(PipelineEvent(EventKind.START, "stylesheets"))
        bridge.handle(PipelineEvent(EventKind.STOP, "stylesheets"))

        assert output.getvalue().splitlines() == [
            "Starting 'stylesheets'...",
            "Finished 'stylesheets'",
        ]
        assert supervisor.exit_code is None

    def test_error_requests_exit(self, console, output):
        bridge, supervisor = make_bridge(console)
        bridge.handle(
            PipelineEvent(EventKind.ERROR, "scripts", ValueError("bad syntax"))
        )

        text = output.getvalue()
        assert "Error in: 'scripts'" in text
        assert "ValueError: bad syntax" in text
        assert supervisor.exit_code == 1

    def test_consume(self, console, output):
        bridge, _ = make_bridge(console)

        async def scenario():
            events = EventStream()
            events.start("templates")
            events.stop("templates")
            events.close()
            await bridge.consume(events)

        asyncio.run(scenario())
        assert "Starting 'templates'..." in output.getvalue()
        assert "Finished 'templates'" in output.getvalue()
