"""
Tests for the Redis Streams relay and the worker loop.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ResponseError

from basecore.redis import ensure_stream_group
from messaging_inapp.contracts.envelope import AnalyticsEvent
from messaging_inapp.contracts.event_types import ANALYTICS_CHANNEL
from messaging_inapp.streams import AnalyticsStreamConsumer, AnalyticsStreamProducer
from messaging_inapp.streams.groups import StreamConfig, ensure_analytics_stream
from messaging_inapp.worker import run_worker


def stream_entry(msg_id, event="record", data=None):
    return (msg_id, {"event": event, "data": json.dumps(data)})


@pytest.fixture
def redis_client():
    return AsyncMock()


class TestStreamGroups:
    @pytest.mark.asyncio
    async def test_creates_group(self, redis_client):
        assert await ensure_stream_group(redis_client, "s", "g") is True
        redis_client.xgroup_create.assert_awaited_once_with("s", "g", id="0", mkstream=True)

    @pytest.mark.asyncio
    async def test_existing_group(self, redis_client):
        redis_client.xgroup_create.side_effect = ResponseError("BUSYGROUP Consumer Group name already exists")
        assert await ensure_analytics_stream(redis_client, StreamConfig("s", "g")) is False

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, redis_client):
        redis_client.xgroup_create.side_effect = ResponseError("WRONGTYPE")
        with pytest.raises(ResponseError):
            await ensure_stream_group(redis_client, "s", "g")


class TestProducer:
    @pytest.mark.asyncio
    async def test_publish_record(self, redis_client):
        redis_client.xadd.return_value = "1-0"
        producer = AnalyticsStreamProducer(redis_client, stream_name="events")

        msg_id = await producer.publish_record("purchase", {"plan": "pro"}, {"amount": 9.5})

        assert msg_id == "1-0"
        stream, fields = redis_client.xadd.await_args.args
        assert stream == "events"
        assert fields["event"] == "record"
        assert json.loads(fields["data"]) == {
            "name": "purchase",
            "attributes": {"plan": "pro"},
            "metrics": {"amount": 9.5},
        }
        assert redis_client.xadd.await_args.kwargs == {"maxlen": 100000, "approximate": True}


class TestConsumer:
    @pytest.mark.asyncio
    async def test_read_events(self, redis_client):
        redis_client.xreadgroup.return_value = [
            ["inapp:analytics", [stream_entry("1-0", data={"name": "purchase"})]],
        ]
        consumer = AnalyticsStreamConsumer(redis_client, hub=None, consumer_name="c1")

        events = await consumer.read_events()

        assert events == [("1-0", AnalyticsEvent("record", {"name": "purchase"}))]

    @pytest.mark.asyncio
    async def test_empty_read(self, redis_client):
        redis_client.xreadgroup.return_value = []
        consumer = AnalyticsStreamConsumer(redis_client, hub=None, consumer_name="c1")

        assert await consumer.read_events() == []

    @pytest.mark.asyncio
    async def test_unparseable_entries_are_acked(self, redis_client):
        redis_client.xreadgroup.return_value = [
            ["inapp:analytics", [("1-0", {"data": "{}"}), ("2-0", {"event": "record", "data": "{nope"})]],
        ]
        consumer = AnalyticsStreamConsumer(redis_client, hub=None, consumer_name="c1")

        assert await consumer.read_events() == []
        acked = [call.args[2] for call in redis_client.xack.await_args_list]
        assert acked == ["1-0", "2-0"]

    @pytest.mark.asyncio
    async def test_missing_group_propagates(self, redis_client):
        redis_client.xreadgroup.side_effect = ResponseError("NOGROUP No such key")
        consumer = AnalyticsStreamConsumer(redis_client, hub=None, consumer_name="c1")

        with pytest.raises(ResponseError):
            await consumer.read_events()

    @pytest.mark.asyncio
    async def test_relay_dispatches_then_acks(self, redis_client, hub):
        redis_client.xreadgroup.return_value = [
            ["inapp:analytics", [stream_entry("1-0", data={"name": "purchase"})]],
        ]
        received = []
        hub.listen(ANALYTICS_CHANNEL, received.append)
        consumer = AnalyticsStreamConsumer(redis_client, hub, consumer_name="c1")

        assert await consumer.relay() == 1

        assert received[0].payload == {"event": "record", "data": {"name": "purchase"}}
        assert received[0].source == "stream:inapp:analytics"
        redis_client.xack.assert_awaited_once_with("inapp:analytics", "inapp-engine", "1-0")


class FakeConsumer:
    """Relays one scripted batch per call, then stops the worker."""

    consumer_name = "test-consumer"
    stream_name = "inapp:analytics"

    def __init__(self, hub, batches, stop):
        self.hub = hub
        self.batches = list(batches)
        self.stop = stop

    async def relay(self, count=10, block_ms=5000):
        batch = self.batches.pop(0)
        if not self.batches:
            self.stop.set()
        if isinstance(batch, Exception):
            raise batch
        for payload in batch:
            self.hub.dispatch(ANALYTICS_CHANNEL, payload)
        return len(batch)


class TestRunWorker:
    @pytest.mark.asyncio
    async def test_relays_until_stopped(self, engine, hub, push_provider):
        engine.add_pluggable(push_provider)
        engine.configure({})
        received = []
        engine.on_messages_received(received.append)
        stop = asyncio.Event()
        record = {"event": "record", "data": {"name": "purchase"}}
        consumer = FakeConsumer(hub, [[record], [record]], stop)

        relayed = await run_worker(engine, consumer, stop)

        assert relayed == 2
        assert push_provider.fetch_calls == 1
        assert len(received) == 2

    @pytest.mark.asyncio
    async def test_loop_survives_errors(self, engine, hub):
        engine.configure({})
        stop = asyncio.Event()
        consumer = FakeConsumer(hub, [RuntimeError("redis down"), []], stop)

        assert await run_worker(engine, consumer, stop) == 0
