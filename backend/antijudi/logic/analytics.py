"""Loss analytics derived from spin history.

Everything here is recomputed from the history sequence alone, so results
stay consistent however often they are queried or replayed.
"""
from itertools import accumulate
from typing import Sequence

from pydantic import BaseModel

from antijudi.errors import ErrorCode, GameError
from antijudi.logic.models import SpinResult


class SpinCounts(BaseModel):
    """Outcome tallies. wins + near_misses <= total."""
    wins: int = 0
    near_misses: int = 0
    total: int = 0


class LossSummary(BaseModel):
    """Everything the loss chart and result screen display."""
    total_loss: int
    total_wagered: int
    total_won: int
    return_to_player: float
    loss_ratio: float
    counts: SpinCounts
    cumulative_loss: list[int]
    series_min: int
    series_max: int


def total_loss(history: Sequence[SpinResult]) -> int:
    """Sum of bets minus sum of wins. Negative means the player is ahead."""
    return sum(s.bet for s in history) - sum(s.win for s in history)


def cumulative_loss_series(history: Sequence[SpinResult]) -> list[int]:
    """Running total of (bet - win), one point per spin in chronological order."""
    return list(accumulate(s.net_loss for s in history))


def counts(history: Sequence[SpinResult]) -> SpinCounts:
    return SpinCounts(
        wins=sum(1 for s in history if s.is_win),
        near_misses=sum(1 for s in history if s.near_miss),
        total=len(history),
    )


def loss_ratio(history: Sequence[SpinResult], cap: int | float) -> float:
    """
    Loss normalized by `cap` for progress-bar displays.

    Clamped to [0.0, 1.0]: a net gain reads as 0, losses beyond cap read as 1.
    """
    if cap <= 0:
        raise GameError(
            ErrorCode.INVALID_REQUEST,
            f"Loss ratio cap must be positive, got {cap}.",
        )
    return max(0.0, min(1.0, total_loss(history) / cap))


def summarize(history: Sequence[SpinResult], cap: int | float) -> LossSummary:
    """Bundle all aggregates for one history snapshot."""
    series = cumulative_loss_series(history)
    wagered = sum(s.bet for s in history)
    won = sum(s.win for s in history)
    return LossSummary(
        total_loss=wagered - won,
        total_wagered=wagered,
        total_won=won,
        return_to_player=(won / wagered) if wagered > 0 else 0.0,
        loss_ratio=loss_ratio(history, cap),
        counts=counts(history),
        cumulative_loss=series,
        series_min=min(series, default=0),
        series_max=max(series, default=0),
    )
