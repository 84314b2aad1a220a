"""Cosmetic reel flicker shown while a spin is "rolling".

Purely presentational: frames are drawn from their own RNG and never feed
into the settled outcome. Nothing here writes to GameState.
"""
import asyncio
from typing import AsyncIterator

from antijudi.config import settings
from antijudi.logic.engine import REEL_COUNT, SYMBOL_COUNT
from antijudi.logic.models import GameState, Reels, Symbol
from antijudi.logic.rng import RNGBase


def random_frame(rng: RNGBase) -> Reels:
    """One flicker frame of random symbols."""
    return tuple(Symbol(rng.randint(0, SYMBOL_COUNT - 1)) for _ in range(REEL_COUNT))


async def spin_flicker(
    rng: RNGBase,
    frames: int = settings.animation_frames,
    interval_ms: int = settings.animation_interval_ms,
) -> AsyncIterator[Reels]:
    """
    Yield `frames` random reel lines, `interval_ms` apart.

    Cancel the consuming task (or call aclose()) to stop early.
    """
    for i in range(frames):
        yield random_frame(rng)
        if i < frames - 1:
            await asyncio.sleep(interval_ms / 1000)


def settle_frames(state: GameState, rng: RNGBase, frames: int = settings.animation_frames) -> list[Reels]:
    """Flicker frames followed by the state's settled reels."""
    flicker = [random_frame(rng) for _ in range(frames)]
    return flicker + [state.current_symbols]
