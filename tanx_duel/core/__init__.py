"""Simulation core for Tanx Duel, independent of rendering."""

from tanx_duel.core.explosion import Explosion
from tanx_duel.core.missile import Missile
from tanx_duel.core.noise import FractalNoise
from tanx_duel.core.round import (
    Aiming,
    Exploding,
    FlyingOfMissile,
    GameState,
    Round,
    RoundSettings,
    SilentSoundSink,
    SoundSink,
    Subsidence,
    TanksThrowing,
)
from tanx_duel.core.tank import PlacementStatus, Tank
from tanx_duel.core.terrain import InvalidDimensions, Terrain

__all__ = [
    "Aiming",
    "Exploding",
    "Explosion",
    "FlyingOfMissile",
    "FractalNoise",
    "GameState",
    "InvalidDimensions",
    "Missile",
    "PlacementStatus",
    "Round",
    "RoundSettings",
    "SilentSoundSink",
    "SoundSink",
    "Subsidence",
    "Tank",
    "TanksThrowing",
    "Terrain",
]
