"""Tests for the tournament event bus and the events services publish."""
import json
import queue

import pytest

from torneo.errors import ValidationError
from torneo.events import TournamentEventBus, event_bus
from torneo.services.date_service import generate_date_fixture, close_tournament_date
from torneo.services.match_service import apply_result


def _drain(q):
    messages = []
    while True:
        try:
            messages.append(json.loads(q.get_nowait()))
        except queue.Empty:
            return messages


class TestTournamentEventBus:
    def test_publish_delivers_message(self):
        bus = TournamentEventBus()
        q = bus.subscribe()
        bus.publish("match_result", 7, match_id=3)

        msg = json.loads(q.get_nowait())
        assert msg["type"] == "match_result"
        assert msg["tournament_id"] == 7
        assert msg["data"] == {"match_id": 3}
        assert "timestamp" in msg

    def test_subscriber_only_sees_its_tournament(self):
        bus = TournamentEventBus()
        mine = bus.subscribe(1)
        everything = bus.subscribe()

        bus.publish("date_closed", 2, date_id=5)
        bus.publish("date_closed", 1, date_id=4)

        assert [m["data"]["date_id"] for m in _drain(mine)] == [4]
        assert [m["data"]["date_id"] for m in _drain(everything)] == [5, 4]

    def test_unsubscribe(self):
        bus = TournamentEventBus()
        q = bus.subscribe()
        bus.unsubscribe(q)

        bus.publish("standings_updated", 1)

        assert bus.subscriber_count == 0
        assert q.empty()

    def test_full_queue_is_dropped(self):
        bus = TournamentEventBus(maxsize=3)
        q = bus.subscribe()
        for i in range(3):
            bus.publish("fill", 1, i=i)
        assert bus.subscriber_count == 1

        bus.publish("overflow", 1)

        assert bus.subscriber_count == 0
        assert q.qsize() == 3

    def test_filtered_subscriber_not_dropped_by_other_traffic(self):
        bus = TournamentEventBus(maxsize=1)
        bus.subscribe(1)
        for _ in range(5):
            bus.publish("fill", 2)
        assert bus.subscriber_count == 1

    def test_clear(self):
        bus = TournamentEventBus()
        bus.subscribe()
        bus.subscribe(3)
        bus.clear()
        assert bus.subscriber_count == 0


def test_services_publish_events(tournament_with_date):
    tournament, date = tournament_with_date
    q = event_bus.subscribe(tournament.id)

    matches = generate_date_fixture(date.id)
    for match in matches:
        apply_result(match.id, 1, 1)
    close_tournament_date(tournament.id, date.id)

    messages = _drain(q)
    types = [m["type"] for m in messages]
    assert types[0] == "fixture_generated"
    assert messages[0]["data"]["match_count"] == 6
    assert messages[0]["data"]["replay"] is False
    assert types.count("match_result") == 6
    assert types.count("standings_updated") == 6
    assert types[-1] == "date_closed"
    assert all(m["tournament_id"] == tournament.id for m in messages)


def test_failed_operation_publishes_nothing(tournament_with_date):
    _, date = tournament_with_date
    match = generate_date_fixture(date.id)[0]
    q = event_bus.subscribe()

    with pytest.raises(ValidationError):
        apply_result(match.id, -1, 0)

    assert q.empty()


# ── SSE endpoint ─────────────────────────────────────────────────────────────


def _text(chunk):
    return chunk.decode() if isinstance(chunk, bytes) else chunk


class TestEventStream:
    @pytest.fixture(autouse=True)
    def fast_keepalive(self, app):
        previous = app.config["SSE_KEEPALIVE_SECONDS"]
        app.config["SSE_KEEPALIVE_SECONDS"] = 0.05
        yield
        app.config["SSE_KEEPALIVE_SECONDS"] = previous

    def test_stream_headers(self, client):
        resp = client.get("/api/events/stream", buffered=False)
        try:
            assert resp.status_code == 200
            assert resp.mimetype == "text/event-stream"
            assert resp.headers["Cache-Control"] == "no-cache"
        finally:
            resp.close()

    def test_stream_sends_keepalive_then_events(self, client):
        resp = client.get("/api/events/stream?tournament_id=1", buffered=False)
        chunks = iter(resp.response)
        try:
            # Nothing published yet; the first chunk also registers the subscriber
            assert _text(next(chunks)) == ": keepalive\n\n"
            assert event_bus.subscriber_count == 1

            event_bus.publish("date_closed", 2, date_id=8)
            event_bus.publish("date_closed", 1, date_id=9)

            chunk = _text(next(chunks))
            assert chunk.startswith("data: ")
            msg = json.loads(chunk[len("data: "):])
            assert msg["type"] == "date_closed"
            assert msg["data"] == {"date_id": 9}
        finally:
            resp.close()

        assert event_bus.subscriber_count == 0
