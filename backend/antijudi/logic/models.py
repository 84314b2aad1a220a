"""Game state models for the slot simulator."""
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from antijudi.config import settings


# Upper bound for the drifting edge, house_edge lives in [0, 1)
MAX_HOUSE_EDGE = 0.99


class Symbol(int, Enum):
    """Reel symbols."""
    CHERRY = 0
    LEMON = 1
    BELL = 2


SYMBOL_GLYPHS: dict[Symbol, str] = {
    Symbol.CHERRY: "🍒",
    Symbol.LEMON: "🍋",
    Symbol.BELL: "🔔",
}

Reels = tuple[Symbol, Symbol, Symbol]

DEFAULT_REELS: Reels = (Symbol.CHERRY, Symbol.CHERRY, Symbol.CHERRY)


def classify(symbols: Reels) -> tuple[bool, bool]:
    """
    Classify a settled reel line.

    Returns (is_win, near_miss): a win is three of a kind, a near-miss is
    exactly two of a kind. Never both.
    """
    a, b, c = symbols
    is_win = a == b == c
    near_miss = not is_win and (a == b or b == c or a == c)
    return is_win, near_miss


class SpinResult(BaseModel):
    """One settled spin. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    bet: int = Field(..., gt=0)
    win: int = Field(default=0, ge=0)
    is_win: bool = False
    near_miss: bool = False
    timestamp: int = Field(..., ge=0)  # epoch milliseconds
    symbols: Reels

    @model_validator(mode="after")
    def _flags_match_symbols(self) -> "SpinResult":
        if self.is_win and self.near_miss:
            raise ValueError("A spin cannot be both a win and a near-miss")
        if (self.is_win, self.near_miss) != classify(self.symbols):
            raise ValueError(
                f"is_win={self.is_win} near_miss={self.near_miss} "
                f"does not match symbols {[int(s) for s in self.symbols]}"
            )
        if self.win and not self.is_win:
            raise ValueError("Only a three-of-a-kind pays out")
        return self

    @property
    def net_loss(self) -> int:
        """What the player lost on this spin (negative on a win)."""
        return self.bet - self.win


class GameState(BaseModel):
    """
    Simulation session state.

    Tracks:
    - balance (starts at initial_balance, never clamped)
    - house_edge / base_win_probability (configuration, display only)
    - spin_counter (drives edge drift)
    - history (append-only, chronological)
    - current_symbols (last settled reels)
    """

    initial_balance: int = Field(default_factory=lambda: settings.initial_balance)
    balance: int = 0
    house_edge: float = Field(
        default_factory=lambda: settings.house_edge, ge=0.0, lt=1.0
    )
    base_win_probability: float = Field(
        default_factory=lambda: settings.base_win_probability, ge=0.0, lt=1.0
    )
    spin_counter: int = Field(default=0, ge=0)
    history: list[SpinResult] = Field(default_factory=list)
    current_symbols: Reels = DEFAULT_REELS

    @model_validator(mode="before")
    @classmethod
    def _balance_defaults_to_initial(cls, data: Any) -> Any:
        if isinstance(data, dict) and "balance" not in data:
            data = dict(data)
            data["balance"] = data.get("initial_balance", settings.initial_balance)
        return data

    def effective_house_edge(self) -> float:
        """House edge after drift: +step every `edge_drift_interval` spins."""
        drift = (self.spin_counter // settings.edge_drift_interval) * settings.edge_drift_step
        return min(MAX_HOUSE_EDGE, self.house_edge + drift)

    def dynamic_win_probability(self) -> float:
        """Advertised win chance after the drifting edge is applied."""
        return self.base_win_probability * (1.0 - self.effective_house_edge())

    def reset_for_new_session(self) -> None:
        """Reset state for new session."""
        self.balance = self.initial_balance
        self.history = []
        self.spin_counter = 0
        self.current_symbols = DEFAULT_REELS
