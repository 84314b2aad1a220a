"""Spin recording delivery tests.

These tests verify:
1. spin_recorded carries the settled spin and the player's device id
2. Rejected spins record nothing
3. Sink failures do not break HTTP requests or the session
4. A spin or reset that failed to persist records nothing
"""
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from antijudi.main import app
from antijudi.session_store import SessionStore
from tests.conftest import FailingSink

if TYPE_CHECKING:
    from tests.conftest import MockRedis, RecordingSink


class TestSpinRecordingDelivery:

    def test_spin_recorded_matches_response(
        self,
        client_with_recording_sink: tuple[TestClient, "RecordingSink"],
    ):
        client, sink = client_with_recording_sink

        response = client.post(
            "/spin",
            headers={"X-Player-Id": "player-record-test"},
            json={"bet": 50},
        )

        assert response.status_code == 200
        result = response.json()["result"]

        events = sink.get_events("spin_recorded")
        assert len(events) == 1, f"Expected 1 spin_recorded event, got {len(events)}"
        event = events[0]
        assert event["deviceId"] == "player-record-test"
        assert event["id"] == result["id"]
        assert event["bet"] == 50
        assert event["win"] == result["win"]
        assert event["symbols"] == result["symbols"]
        assert event["balance"] == response.json()["session"]["balance"]
        assert all(c in "0123456789abcdef" for c in event["configHash"])

    def test_rejected_spin_records_nothing(
        self,
        client_with_recording_sink: tuple[TestClient, "RecordingSink"],
        mock_redis: "MockRedis",
    ):
        client, sink = client_with_recording_sink
        mock_redis._store[f"{SessionStore.LOCK_PREFIX}player-busy"] = "held"

        response = client.post(
            "/spin", headers={"X-Player-Id": "player-busy"}, json={"bet": 10}
        )

        assert response.status_code == 409
        assert sink.get_events("spin_recorded") == []

    def test_spin_not_recorded_when_save_fails(
        self,
        client_with_recording_sink: tuple[TestClient, "RecordingSink"],
        mock_redis: "MockRedis",
        monkeypatch: pytest.MonkeyPatch,
    ):
        client, sink = client_with_recording_sink

        async def failing_setex(key: str, ttl: int, value: str) -> bool:
            raise ConnectionError("redis unavailable")

        monkeypatch.setattr(mock_redis, "setex", failing_setex)

        response = client.post(
            "/spin", headers={"X-Player-Id": "player-save-fails"}, json={"bet": 10}
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
        assert sink.get_events("spin_recorded") == []

    def test_reset_not_recorded_when_clear_fails(
        self,
        client_with_recording_sink: tuple[TestClient, "RecordingSink"],
        mock_redis: "MockRedis",
        monkeypatch: pytest.MonkeyPatch,
    ):
        client, sink = client_with_recording_sink
        client.post("/spin", headers={"X-Player-Id": "player-clear-fails"}, json={"bet": 10})

        async def failing_delete(key: str) -> int:
            raise ConnectionError("redis unavailable")

        monkeypatch.setattr(mock_redis, "delete", failing_delete)

        response = client.post("/reset", headers={"X-Player-Id": "player-clear-fails"})

        assert response.status_code == 500
        assert sink.get_events("session_reset") == []

    def test_reset_recorded(
        self,
        client_with_recording_sink: tuple[TestClient, "RecordingSink"],
    ):
        client, sink = client_with_recording_sink
        client.post("/spin", headers={"X-Player-Id": "player-reset"}, json={"bet": 10})

        client.post("/reset", headers={"X-Player-Id": "player-reset"})

        events = sink.get_events("session_reset")
        assert len(events) == 1
        assert events[0]["deviceId"] == "player-reset"
        assert events[0]["spinsDiscarded"] == 1

    def test_sink_failure_does_not_break_request(self, mock_redis: "MockRedis"):
        """A failing sink must not fail /spin nor lose the spin."""
        from antijudi.session_store import session_store
        from antijudi.telemetry import spin_recorder

        original_redis_client = session_store._client
        original_sink = spin_recorder.sink
        errors_before = spin_recorder.sink_errors

        session_store._client = mock_redis
        spin_recorder.set_sink(FailingSink())

        try:
            with TestClient(app) as client:
                response = client.post(
                    "/spin",
                    headers={"X-Player-Id": "player-sink-test"},
                    json={"bet": 10},
                )
                assert response.status_code == 200, (
                    f"Expected 200 despite sink failure, got {response.status_code}"
                )

                session = client.get(
                    "/init", headers={"X-Player-Id": "player-sink-test"}
                ).json()["session"]
                assert session["spinCount"] == 1
        finally:
            session_store._client = original_redis_client
            spin_recorder.set_sink(original_sink)

        assert spin_recorder.sink_errors == errors_before + 1
