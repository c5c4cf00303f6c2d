"""
Unit tests for domain event dispatching.
"""

import pytest

from timetrack.domain.events.base import EventDispatcher, EventHandler
from timetrack.domain.events.time_entry_events import TimerDiscarded, TimerStarted


class RecordingHandler(EventHandler):

    def __init__(self, accepts=None):
        self.accepts = accepts
        self.seen = []

    async def handle(self, event):
        self.seen.append(event)

    def can_handle(self, event):
        return self.accepts is None or event.event_type in self.accepts


class FailingHandler(EventHandler):

    async def handle(self, event):
        raise RuntimeError("mailer down")

    def can_handle(self, event):
        return True


class TestEventDispatcher:
    """Test cases for EventDispatcher."""

    def setup_method(self):
        self.dispatcher = EventDispatcher()

    @pytest.mark.asyncio
    async def test_dispatch_to_typed_handler(self):
        handler = RecordingHandler()
        self.dispatcher.register_handler("TimerStarted", handler)

        await self.dispatcher.dispatch(TimerStarted(user_id="u1", task_id="t1"))
        await self.dispatcher.dispatch(TimerDiscarded(user_id="u1"))

        assert [e.event_type for e in handler.seen] == ["TimerStarted"]

    @pytest.mark.asyncio
    async def test_global_handler_filters_with_can_handle(self):
        handler = RecordingHandler(accepts={"TimerDiscarded"})
        self.dispatcher.register_global_handler(handler)

        await self.dispatcher.dispatch(TimerStarted(user_id="u1"))
        await self.dispatcher.dispatch(TimerDiscarded(user_id="u1"))

        assert [e.event_type for e in handler.seen] == ["TimerDiscarded"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self):
        recorder = RecordingHandler()
        self.dispatcher.register_handler("TimerStarted", FailingHandler())
        self.dispatcher.register_handler("TimerStarted", recorder)

        await self.dispatcher.dispatch(TimerStarted(user_id="u1"))

        assert len(recorder.seen) == 1

    @pytest.mark.asyncio
    async def test_event_log_newest_first(self):
        await self.dispatcher.dispatch(TimerStarted(user_id="u1"))
        await self.dispatcher.dispatch(TimerDiscarded(user_id="u1", reason="task_deleted"))

        log = self.dispatcher.get_event_log()
        assert log[0]["event_type"] == "TimerDiscarded"
        assert log[0]["data"]["reason"] == "task_deleted"
        assert self.dispatcher.get_event_log(limit=1) == log[:1]

    def test_registered_handlers(self):
        self.dispatcher.register_handler("TimerStarted", RecordingHandler())
        self.dispatcher.register_global_handler(RecordingHandler())

        assert self.dispatcher.get_registered_handlers() == {
            "TimerStarted": ["RecordingHandler"],
            "global": ["RecordingHandler"],
        }
