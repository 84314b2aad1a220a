"""Config hash attached to every recorded spin.

Used by:
- telemetry.py (spin_recorded event configHash field)
- scripts/audit_sim.py (CSV config_hash column)

Both must hash the same snapshot so audit rows can be joined to live data.
"""
import hashlib
import json

from antijudi.config import settings


def get_config_hash() -> str:
    """
    Hash the game-math settings.

    Returns 16-char hex hash of the config snapshot.
    """
    config_snapshot = {
        "initial_balance": settings.initial_balance,
        "bet_presets": list(settings.bet_presets),
        "house_edge": settings.house_edge,
        "base_win_probability": settings.base_win_probability,
        "edge_drift_interval": settings.edge_drift_interval,
        "edge_drift_step": settings.edge_drift_step,
        "min_win_multiplier": settings.min_win_multiplier,
        "max_win_multiplier": settings.max_win_multiplier,
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
