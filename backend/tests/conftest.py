"""Pytest fixtures for backend tests."""
from typing import Any, Generator, Iterable

import pytest
from fastapi.testclient import TestClient

from antijudi.logic.engine import SpinEngine
from antijudi.logic.rng import RNGBase
from antijudi.main import app
from antijudi.session_store import SessionStore
from antijudi.telemetry import SpinRecorder


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (run long simulations)"
    )


class MockRedis:
    """Mock Redis client for testing."""

    def __init__(self):
        self._store: dict[str, str] = {}
        self._last_set_ex: int | None = None  # Track last SET EX value for TTL tests
        self._last_setex_ttl: int | None = None

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(
        self, key: str, value: str, nx: bool = False, ex: int | None = None
    ) -> bool | None:
        if nx and key in self._store:
            return None
        self._store[key] = value
        self._last_set_ex = ex
        return True

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._store[key] = value
        self._last_setex_ttl = ttl
        return True

    async def delete(self, key: str) -> int:
        if key in self._store:
            del self._store[key]
            return 1
        return 0

    async def eval(self, script: str, numkeys: int, *args) -> int:
        """
        Execute Lua script (simplified mock for compare-and-delete).

        - KEYS[1] = args[0] (key)
        - ARGV[1] = args[1] (expected value)
        Returns 1 if deleted, 0 if value didn't match.
        """
        key = args[0]
        expected_value = args[1]
        if self._store.get(key) == expected_value:
            del self._store[key]
            return 1
        return 0

    async def close(self) -> None:
        pass

    def clear(self) -> None:
        self._store.clear()
        self._last_set_ex = None
        self._last_setex_ttl = None


class ScriptedRNG(RNGBase):
    """
    RNG that replays fixed draws.

    randint() cycles through `ints` (symbol draws), random() cycles through
    `floats` (multiplier draws).
    """

    def __init__(self, ints: Iterable[int] = (0, 1, 2), floats: Iterable[float] = (0.5,)):
        self.ints = list(ints)
        self.floats = list(floats)
        self._int_pos = 0
        self._float_pos = 0
        self.random_calls = 0

    def random(self) -> float:
        value = self.floats[self._float_pos % len(self.floats)]
        self._float_pos += 1
        self.random_calls += 1
        return value

    def randint(self, a: int, b: int) -> int:
        value = self.ints[self._int_pos % len(self.ints)]
        self._int_pos += 1
        assert a <= value <= b
        return value


class StepClock:
    """Clock that returns scripted timestamps, then keeps the last one."""

    def __init__(self, *ticks: int):
        self.ticks = list(ticks) or [1_000]
        self._pos = 0

    def now_ms(self) -> int:
        value = self.ticks[min(self._pos, len(self.ticks) - 1)]
        self._pos += 1
        return value


class RecordingSink:
    """Sink that captures emitted records."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def get_events(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]


class FailingSink:
    """Sink that always raises."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        raise RuntimeError(f"Sink failure for {event_name}")


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_engine(recording_sink: RecordingSink):
    """Factory for engines wired to scripted collaborators."""

    def _make(
        ints: Iterable[int] = (0, 1, 2),
        floats: Iterable[float] = (0.5,),
        clock: StepClock | None = None,
    ) -> SpinEngine:
        return SpinEngine(
            rng=ScriptedRNG(ints=ints, floats=floats),
            clock=clock or StepClock(),
            recorder=SpinRecorder(sink=recording_sink),
        )

    return _make


@pytest.fixture
def mock_redis() -> MockRedis:
    """Create a fresh mock Redis for each test."""
    return MockRedis()


@pytest.fixture
def session_store_with_mock(mock_redis: MockRedis) -> Generator[SessionStore, None, None]:
    """Create SessionStore with mock client."""
    store = SessionStore()
    store._client = mock_redis
    yield store
    mock_redis.clear()


@pytest.fixture
def client_with_mock_redis(mock_redis: MockRedis) -> Generator[TestClient, None, None]:
    """Create TestClient with mocked Redis."""
    from antijudi.session_store import session_store

    original_client = session_store._client
    session_store._client = mock_redis

    with TestClient(app) as client:
        yield client

    session_store._client = original_client
    mock_redis.clear()


@pytest.fixture
def scripted_engine(monkeypatch: pytest.MonkeyPatch):
    """Swap the app engine's RNG for scripted draws."""
    from antijudi import main

    def _script(ints: Iterable[int], floats: Iterable[float] = (0.5,)) -> ScriptedRNG:
        rng = ScriptedRNG(ints=ints, floats=floats)
        monkeypatch.setattr(main.engine, "rng", rng)
        return rng

    return _script


@pytest.fixture
def client_with_recording_sink(
    client_with_mock_redis: TestClient, recording_sink: RecordingSink
) -> Generator[tuple[TestClient, RecordingSink], None, None]:
    """TestClient whose global spin recorder writes to a RecordingSink."""
    from antijudi.telemetry import spin_recorder

    original_sink = spin_recorder.sink
    spin_recorder.set_sink(recording_sink)
    yield client_with_mock_redis, recording_sink
    spin_recorder.set_sink(original_sink)


@pytest.fixture
def test_client() -> TestClient:
    """Create basic TestClient (for endpoints that don't need Redis)."""
    return TestClient(app)
