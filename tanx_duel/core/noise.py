"""Deterministic one-dimensional fractal value noise used for terrain heights."""

from __future__ import annotations

import math
from dataclasses import dataclass

_MASK32 = 0xFFFFFFFF


def _hash(ix: int, seed: int, octave: int) -> int:
    n = (ix * 0x1F1F1F1F) ^ (seed * 0x5F356495) ^ (octave * 0x27D4EB2D)
    n &= _MASK32
    n ^= n >> 13
    n = (n * 0x85EBCA6B) & _MASK32
    n ^= n >> 16
    return n


def _lattice(ix: int, seed: int, octave: int) -> float:
    """Lattice value in [-1, 1]."""

    return (_hash(ix, seed, octave) / _MASK32) * 2.0 - 1.0


def _smoothstep(t: float) -> float:
    return t * t * (3 - 2 * t)


@dataclass
class FractalNoise:
    """Fractal Brownian motion over smoothly interpolated value noise."""

    seed: int = 0
    octaves: int = 4
    frequency: float = 1.0
    lacunarity: float = 2.0
    persistence: float = 0.5

    def reseed(self, seed: int) -> None:
        self.seed = seed & _MASK32

    def value(self, x: float, octave: int = 0) -> float:
        ix = int(math.floor(x))
        t = _smoothstep(x - ix)
        n0 = _lattice(ix, self.seed, octave)
        n1 = _lattice(ix + 1, self.seed, octave)
        return n0 * (1 - t) + n1 * t

    def sample(self, x: int) -> float:
        """Return the height offset in [-1, 1] for column ``x``."""

        total = 0.0
        norm = 0.0
        amplitude = 1.0
        freq = self.frequency
        for octave in range(max(1, self.octaves)):
            total += self.value(x * freq, octave) * amplitude
            norm += amplitude
            amplitude *= self.persistence
            freq *= self.lacunarity
        return total / norm


__all__ = ["FractalNoise"]
