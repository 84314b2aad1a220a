"""Best-effort spin recording for analytics sinks."""
import logging
from dataclasses import dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class SpinSink(Protocol):
    """Protocol for spin record sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a record."""
        ...


class LoggingSpinSink:
    """Default sink that logs records."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log record."""
        logger.info("TELEMETRY %s: %s", event_name, data)


class NullSpinSink:
    """Sink that drops every record (offline simulation)."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        pass


@dataclass
class SpinRecordedEvent:
    """spin_recorded snapshot, one per settled spin."""

    id: int
    bet: int
    win: int
    is_win: bool
    near_miss: bool
    timestamp: int
    device_id: str
    symbols: list[int]
    balance: int
    effective_house_edge: float
    config_hash: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "id": self.id,
            "bet": self.bet,
            "win": self.win,
            "isWin": self.is_win,
            "nearMiss": self.near_miss,
            "timestamp": self.timestamp,
            "deviceId": self.device_id,
            "symbols": list(self.symbols),
            "balance": self.balance,
            "effectiveHouseEdge": self.effective_house_edge,
            "configHash": self.config_hash,
        }


@dataclass
class SessionResetEvent:
    """session_reset event."""

    device_id: str
    spins_discarded: int
    final_balance: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "deviceId": self.device_id,
            "spinsDiscarded": self.spins_discarded,
            "finalBalance": self.final_balance,
        }


class SpinRecorder:
    """Forwards spin snapshots to a sink without ever failing the caller."""

    def __init__(self, sink: SpinSink | None = None):
        self._sink = sink or LoggingSpinSink()
        self.sink_errors = 0  # Counter for sink failures

    @property
    def sink(self) -> SpinSink:
        return self._sink

    def set_sink(self, sink: SpinSink) -> None:
        """Set the sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break a spin or a reset.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self.sink_errors += 1
            logger.warning(
                "Spin sink error (count=%d): %s - %s",
                self.sink_errors,
                event_name,
                str(e),
            )

    def record_spin(self, event: SpinRecordedEvent) -> None:
        """Emit spin_recorded event."""
        self._safe_emit("spin_recorded", event.to_dict())

    def record_reset(self, event: SessionResetEvent) -> None:
        """Emit session_reset event."""
        self._safe_emit("session_reset", event.to_dict())


# Global instance
spin_recorder = SpinRecorder()
