"""SnapshotStream Tests"""

import asyncio

import pytest

from marquee.shared.core.stream import SnapshotStream


class TestSnapshotStream:
    """Latest-value retention and fan-out."""

    def test_listen_replays_latest(self):
        stream = SnapshotStream("initial", name="test")
        seen = []

        stream.listen(seen.append)
        stream.publish("next")

        assert seen == ["initial", "next"]
        assert stream.latest == "next"

    def test_listen_without_replay(self):
        stream = SnapshotStream("initial", name="test")
        seen = []

        stream.listen(seen.append, replay=False)
        stream.publish("next")

        assert seen == ["next"]

    def test_cancelled_subscription_stops_receiving(self):
        stream = SnapshotStream(0, name="test")
        seen = []

        subscription = stream.listen(seen.append, replay=False)
        stream.publish(1)
        subscription.cancel()
        subscription.cancel()
        stream.publish(2)

        assert seen == [1]
        assert not subscription.active
        assert stream.subscriber_count == 0

    def test_failing_listener_does_not_block_others(self, caplog):
        stream = SnapshotStream(0, name="test")
        seen = []

        def broken(snapshot):
            raise RuntimeError("listener bug")

        stream.listen(broken, replay=False)
        stream.listen(seen.append, replay=False)
        stream.publish(1)

        assert seen == [1]
        assert "Snapshot listener 'broken' failed" in caplog.text

    def test_publish_after_close_is_ignored(self):
        stream = SnapshotStream(0, name="test")
        seen = []
        stream.listen(seen.append, replay=False)

        stream.close()
        stream.close()
        stream.publish(1)

        assert seen == []
        assert stream.latest == 0
        assert stream.closed

    def test_listen_on_closed_stream_is_inactive(self):
        stream = SnapshotStream(0, name="test")
        stream.close()
        seen = []

        subscription = stream.listen(seen.append)

        assert not subscription.active
        assert seen == []

    @pytest.mark.asyncio
    async def test_subscribe_starts_with_latest_and_ends_on_close(self):
        stream = SnapshotStream("a", name="test")
        seen = []

        async def consume():
            async for snapshot in stream.subscribe():
                seen.append(snapshot)

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        assert stream.subscriber_count == 1

        stream.publish("b")
        stream.publish("c")
        stream.close()
        await asyncio.wait_for(task, timeout=1.0)

        assert seen == ["a", "b", "c"]
        assert stream.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_subscribe_on_closed_stream_yields_nothing(self):
        stream = SnapshotStream("a", name="test")
        stream.close()

        seen = [snapshot async for snapshot in stream.subscribe()]

        assert seen == []
