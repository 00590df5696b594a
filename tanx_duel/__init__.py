"""Top-level package for the Tanx Duel artillery game."""

__version__ = "1.0.0"

from tanx_duel.core import (
    Explosion,
    InvalidDimensions,
    Missile,
    PlacementStatus,
    Round,
    RoundSettings,
    SoundSink,
    Tank,
    Terrain,
)

__all__ = [
    "Explosion",
    "InvalidDimensions",
    "Missile",
    "PlacementStatus",
    "Round",
    "RoundSettings",
    "SoundSink",
    "Tank",
    "Terrain",
    "__version__",
]
