"""Application configuration derived from environment."""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Server settings with simulator defaults."""

    model_config = ConfigDict(env_prefix="ANTIJUDI_")

    # Server
    debug: bool = False
    redis_url: str = "redis://localhost:6379/0"

    # Protocol
    protocol_version: str = "1.0"

    # Simulator economy
    initial_balance: int = 1000
    bet_presets: list[int] = [10, 50]
    house_edge: float = 0.12
    base_win_probability: float = 0.15

    # Edge drift: +step every `interval` spins (display only)
    edge_drift_interval: int = 50
    edge_drift_step: float = 0.01

    # Payout multiplier range for a three-of-a-kind, [min, max)
    min_win_multiplier: float = 2.0
    max_win_multiplier: float = 5.0

    # Normalization constant for the loss progress bar
    loss_ratio_cap: int = 1000

    # Cosmetic reel flicker before the result settles
    animation_frames: int = 15
    animation_interval_ms: int = 100

    # Session persistence (Redis TTLs)
    session_ttl_seconds: int = 86400  # 24 hours

    # Per-player spin lock, auto-expires if the process dies mid-spin
    lock_ttl_seconds: int = 30


settings = Settings()
