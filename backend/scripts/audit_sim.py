#!/usr/bin/env python3
"""
Audit simulation script.

Runs a headless session of N spins and writes a one-row CSV summary, showing
how far the realized return drifts below the stake over a long session.

Usage:
    python -m scripts.audit_sim --rounds 100000 --bet 10 --seed AUDIT_2025 --out out/audit.csv
"""
import argparse
import csv
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from antijudi.config import settings
from antijudi.config_hash import get_config_hash
from antijudi.logic import analytics
from antijudi.logic.analytics import LossSummary
from antijudi.logic.engine import SpinEngine
from antijudi.logic.models import GameState
from antijudi.logic.rng import SeededRNG, seed_to_int
from antijudi.telemetry import NullSpinSink, SpinRecorder


# Theoretical rates for three reels of three equiprobable symbols
THEORETICAL_HIT_FREQ = 3 / 27
THEORETICAL_NEAR_MISS_FREQ = 18 / 27


class _StepClock:
    """Deterministic clock: one millisecond per spin."""

    def __init__(self) -> None:
        self._now = 0

    def now_ms(self) -> int:
        self._now += 1
        return self._now


@dataclass
class SimulationStats:
    """Audit figures for one simulated session."""
    total_wagered: int = 0
    total_won: int = 0
    rounds: int = 0
    wins: int = 0
    near_misses: int = 0
    final_balance: int = 0
    max_drawdown: int = 0  # Peak cumulative loss
    loss_ratio: float = 0.0

    @classmethod
    def from_summary(cls, summary: LossSummary, final_balance: int) -> "SimulationStats":
        return cls(
            total_wagered=summary.total_wagered,
            total_won=summary.total_won,
            rounds=summary.counts.total,
            wins=summary.counts.wins,
            near_misses=summary.counts.near_misses,
            final_balance=final_balance,
            max_drawdown=max(0, summary.series_max),
            loss_ratio=summary.loss_ratio,
        )

    @property
    def total_loss(self) -> int:
        return self.total_wagered - self.total_won

    @property
    def rtp(self) -> float:
        """Return to player in percent."""
        return (self.total_won / self.total_wagered * 100) if self.total_wagered > 0 else 0.0

    @property
    def hit_freq(self) -> float:
        return (self.wins / self.rounds * 100) if self.rounds > 0 else 0.0

    @property
    def near_miss_freq(self) -> float:
        return (self.near_misses / self.rounds * 100) if self.rounds > 0 else 0.0


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def run_simulation(
    rounds: int,
    seed_str: str,
    bet: int = 10,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Aggregates come from the same analytics the service serves on
    /analytics, so the audit and the live charts cannot disagree.

    Args:
        rounds: Number of spins to simulate
        seed_str: Seed string for reproducibility
        bet: Stake per spin
        verbose: Print progress

    Returns:
        SimulationStats with aggregated results
    """
    engine = SpinEngine(
        rng=SeededRNG(seed=seed_str),
        clock=_StepClock(),
        recorder=SpinRecorder(sink=NullSpinSink()),
    )
    state = GameState()

    progress_interval = max(1, rounds // 100)

    for round_count in range(rounds):
        if verbose and round_count % progress_interval == 0:
            pct = (round_count / rounds) * 100
            print(f"\rProgress: {pct:.1f}%", end="", flush=True)

        engine.spin(state, bet)

    if verbose:
        print("\rProgress: 100.0%")

    summary = analytics.summarize(state.history, settings.loss_ratio_cap)
    return SimulationStats.from_summary(summary, final_balance=state.balance)


def generate_csv(
    rounds: int,
    seed_str: str,
    bet: int,
    stats: SimulationStats,
    output_path: str,
) -> None:
    """Write the audit CSV row."""
    row = {
        "timestamp": get_timestamp_iso(),
        "config_hash": get_config_hash(),
        "rounds": rounds,
        "seed": seed_str,
        "bet": bet,
        "initial_balance": settings.initial_balance,
        "rtp": f"{stats.rtp:.4f}",
        "hit_freq": f"{stats.hit_freq:.4f}",
        "near_miss_freq": f"{stats.near_miss_freq:.4f}",
        "total_loss": stats.total_loss,
        "final_balance": stats.final_balance,
        "max_drawdown": stats.max_drawdown,
        "loss_ratio": f"{stats.loss_ratio:.4f}",
    }

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    print(f"CSV written to: {output_path}")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Headless simulator audit")
    parser.add_argument(
        "--rounds",
        type=int,
        required=True,
        help="Number of spins to simulate",
    )
    parser.add_argument(
        "--bet",
        type=int,
        default=settings.bet_presets[0],
        help="Stake per spin",
    )
    parser.add_argument(
        "--seed",
        type=str,
        required=True,
        help="Seed string for reproducibility",
    )
    parser.add_argument(
        "--out",
        type=str,
        required=True,
        help="Output CSV path",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show progress",
    )

    args = parser.parse_args()

    if args.rounds <= 0 or args.bet <= 0:
        parser.error("--rounds and --bet must be positive")

    print(f"Running simulation: rounds={args.rounds}, bet={args.bet}, seed={args.seed}")
    print(f"RNG seed: {seed_to_int(args.seed)}")
    print(f"Config hash: {get_config_hash()}")

    stats = run_simulation(
        rounds=args.rounds,
        seed_str=args.seed,
        bet=args.bet,
        verbose=args.verbose,
    )

    generate_csv(
        rounds=args.rounds,
        seed_str=args.seed,
        bet=args.bet,
        stats=stats,
        output_path=args.out,
    )

    print(f"\nSummary:")
    print(f"  Spins: {stats.rounds}")
    print(f"  Total wagered: {stats.total_wagered}")
    print(f"  Total won: {stats.total_won}")
    print(f"  Total loss: {stats.total_loss}")
    print(f"  RTP: {stats.rtp:.4f}%")
    print(f"  Hit frequency: {stats.hit_freq:.4f}% (theory {THEORETICAL_HIT_FREQ * 100:.4f}%)")
    print(f"  Near-miss frequency: {stats.near_miss_freq:.4f}% (theory {THEORETICAL_NEAR_MISS_FREQ * 100:.4f}%)")
    print(f"  Final balance: {stats.final_balance}")
    print(f"  Max drawdown: {stats.max_drawdown}")
    print(f"  Loss ratio (cap {settings.loss_ratio_cap}): {stats.loss_ratio:.4f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
