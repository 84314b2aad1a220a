"""Spin engine for the three-reel simulator."""
import math

from antijudi.config import settings
from antijudi.config_hash import get_config_hash
from antijudi.errors import ErrorCode, GameError
from antijudi.logic.clock import Clock, SystemClock
from antijudi.logic.models import GameState, Reels, SpinResult, Symbol, classify
from antijudi.logic.rng import ProductionRNG, RNGBase
from antijudi.telemetry import (
    SessionResetEvent,
    SpinRecordedEvent,
    SpinRecorder,
    spin_recorder,
)


# === CONFIG VALUES (via settings) ===
REEL_COUNT = 3
SYMBOL_COUNT = len(Symbol)

MIN_WIN_MULTIPLIER = settings.min_win_multiplier
MAX_WIN_MULTIPLIER = settings.max_win_multiplier

ANONYMOUS_DEVICE = "anonymous"


class SpinEngine:
    """
    Slot logic engine.

    Implements:
    - Independent uniform draw per reel
    - Match-based win / near-miss classification
    - Random payout multiplier in [MIN_WIN_MULTIPLIER, MAX_WIN_MULTIPLIER)
    - Balance and history updates applied together per spin
    - Fire-and-forget spin recording

    house_edge and base_win_probability on the state are reported but do not
    gate the draw.
    """

    def __init__(
        self,
        rng: RNGBase | None = None,
        clock: Clock | None = None,
        recorder: SpinRecorder | None = None,
    ):
        self.rng = rng or ProductionRNG()
        self.clock = clock or SystemClock()
        self.recorder = recorder or spin_recorder

        for method in ("random", "randint"):
            if not callable(getattr(self.rng, method, None)):
                raise TypeError(f"RNG {self.rng!r} does not provide {method}()")
        if not callable(getattr(self.clock, "now_ms", None)):
            raise TypeError(f"Clock {self.clock!r} does not provide now_ms()")

    def draw_symbols(self) -> Reels:
        """Draw one symbol per reel, left to right."""
        return tuple(
            Symbol(self.rng.randint(0, SYMBOL_COUNT - 1)) for _ in range(REEL_COUNT)
        )

    def payout(self, bet: int) -> int:
        """Payout for a three-of-a-kind: floor(bet * multiplier)."""
        multiplier = MIN_WIN_MULTIPLIER + self.rng.random() * (
            MAX_WIN_MULTIPLIER - MIN_WIN_MULTIPLIER
        )
        # r just below 1.0 can round the product up to bet * MAX_WIN_MULTIPLIER
        ceiling = math.ceil(bet * MAX_WIN_MULTIPLIER) - 1
        return min(math.floor(bet * multiplier), ceiling)

    def spin(
        self,
        state: GameState,
        bet: int,
        device_id: str = ANONYMOUS_DEVICE,
    ) -> SpinResult:
        """
        Execute a spin against `state`, record it, and return the result.

        Args:
            state: Session state, mutated in place
            bet: Positive integer stake
            device_id: Player/device identifier forwarded to the recorder

        Returns:
            The SpinResult appended to state.history

        Raises:
            GameError(INVALID_BET) if bet is not a positive integer; state is
            left untouched.
        """
        result = self.settle(state, bet)
        self.record(state, result, device_id)
        return result

    def settle(self, state: GameState, bet: int) -> SpinResult:
        """
        Draw, classify and apply one spin without recording it.

        Callers that persist the state first (the HTTP layer) record
        afterwards with record().
        """
        if isinstance(bet, bool) or not isinstance(bet, int) or bet <= 0:
            raise GameError(
                ErrorCode.INVALID_BET,
                f"Bet must be a positive integer, got {bet!r}.",
            )

        # 1) Draw and classify
        symbols = self.draw_symbols()
        is_win, near_miss = classify(symbols)

        # 2) Payout (extra draw only on a win)
        win = self.payout(bet) if is_win else 0

        # 3) Build the record before touching state
        spin_id = state.spin_counter + 1
        timestamp = self.clock.now_ms()
        if state.history:
            timestamp = max(timestamp, state.history[-1].timestamp)

        result = SpinResult(
            id=spin_id,
            bet=bet,
            win=win,
            is_win=is_win,
            near_miss=near_miss,
            timestamp=timestamp,
            symbols=symbols,
        )

        # 4) Apply (balance is never clamped)
        state.spin_counter = spin_id
        state.balance = state.balance - bet + win
        state.current_symbols = symbols
        state.history.append(result)

        return result

    def record(
        self,
        state: GameState,
        result: SpinResult,
        device_id: str = ANONYMOUS_DEVICE,
    ) -> None:
        """Send a settled spin to the recorder. Sink errors never reach the caller."""
        self.recorder.record_spin(
            SpinRecordedEvent(
                id=result.id,
                bet=result.bet,
                win=result.win,
                is_win=result.is_win,
                near_miss=result.near_miss,
                timestamp=result.timestamp,
                device_id=device_id,
                symbols=[int(s) for s in result.symbols],
                balance=state.balance,
                effective_house_edge=state.effective_house_edge(),
                config_hash=get_config_hash(),
            )
        )

    def reset(self, state: GameState, device_id: str = ANONYMOUS_DEVICE) -> None:
        """Restore the initial balance and clear history and counter."""
        spins_discarded = state.spin_counter
        final_balance = state.balance
        state.reset_for_new_session()
        self.recorder.record_reset(
            SessionResetEvent(
                device_id=device_id,
                spins_discarded=spins_discarded,
                final_balance=final_balance,
            )
        )
