"""Test observable state holders."""

from __future__ import annotations

import asyncio

import pytest

from bletext.observable import StateStream, StatusFeed


class TestStateStream:
    """Test current-value stream."""

    def test_initial_value(self):
        assert StateStream(3).value == 3

    def test_subscribers_see_changes_only(self):
        stream = StateStream("a")
        seen: list[str] = []
        stream.subscribe(seen.append)

        stream.publish("a")
        stream.publish("b")
        stream.publish("b")
        stream.publish("c")

        assert seen == ["b", "c"]
        assert stream.value == "c"

    def test_unsubscribe(self):
        stream = StateStream(0)
        seen: list[int] = []
        unsubscribe = stream.subscribe(seen.append)

        stream.publish(1)
        unsubscribe()
        unsubscribe()
        stream.publish(2)

        assert seen == [1]

    def test_failing_subscriber_does_not_block_others(self):
        stream = StateStream(0)
        seen: list[int] = []

        def boom(_value: int) -> None:
            raise RuntimeError("boom")

        stream.subscribe(boom)
        stream.subscribe(seen.append)
        stream.publish(1)

        assert seen == [1]

    @pytest.mark.asyncio
    async def test_watch_yields_current_then_latest(self):
        stream = StateStream(0)
        watcher = stream.watch()

        assert await watcher.__anext__() == 0

        stream.publish(1)
        stream.publish(2)
        assert await asyncio.wait_for(watcher.__anext__(), 1) == 2

        await watcher.aclose()


class TestStatusFeed:
    """Test status message feed."""

    def test_rejects_empty_buffer(self):
        with pytest.raises(ValueError):
            StatusFeed(0)

    def test_replays_latest_to_new_subscriber(self):
        feed = StatusFeed()
        feed.emit("one")
        feed.emit("two")

        seen: list[str] = []
        feed.subscribe(seen.append)
        feed.emit("three")

        assert seen == ["two", "three"]
        assert feed.latest == "three"

    def test_failing_replay_subscriber_is_logged(self, caplog):
        feed = StatusFeed()
        feed.emit("Scanning...")
        seen: list[str] = []

        def boom(_message: str) -> None:
            raise RuntimeError("boom")

        feed.subscribe(boom)
        feed.subscribe(seen.append)
        feed.emit("Scan stopped")

        assert seen == ["Scanning...", "Scan stopped"]
        assert "Status subscriber" in caplog.text

    def test_no_replay_before_first_message(self):
        feed = StatusFeed()
        seen: list[str] = []
        feed.subscribe(seen.append)

        assert seen == []
        assert feed.latest is None

    def test_repeated_messages_delivered(self):
        feed = StatusFeed()
        seen: list[str] = []
        feed.subscribe(seen.append)

        feed.emit("Disconnected")
        feed.emit("Disconnected")

        assert seen == ["Disconnected", "Disconnected"]

    @pytest.mark.asyncio
    async def test_slow_reader_drops_oldest(self):
        feed = StatusFeed(buffer_size=2)
        feed.emit("replayed")
        messages = feed.messages()

        assert await messages.__anext__() == "replayed"

        for i in range(5):
            feed.emit(f"m{i}")

        assert await asyncio.wait_for(messages.__anext__(), 1) == "m3"
        assert await asyncio.wait_for(messages.__anext__(), 1) == "m4"

        await messages.aclose()
