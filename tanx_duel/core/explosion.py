"""Growing circular blast that carves a crater out of the terrain."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from tanx_duel.core.terrain import EMPTY, Terrain


@dataclass
class Explosion:
    center: Tuple[int, int]
    max_radius: float
    growth: float = 2.0
    radius: float = 0.0

    @property
    def done(self) -> bool:
        return self.radius >= self.max_radius

    def update(self, terrain: Terrain) -> bool:
        """Grow the blast by one step and clear the disk it now covers."""

        if self.growth <= 0:
            self.radius = self.max_radius
        else:
            self.radius = min(self.max_radius, self.radius + self.growth)
        carve_disk(terrain, self.center, self.radius)
        return self.done


def carve_disk(terrain: Terrain, center: Tuple[int, int], radius: float) -> int:
    """Empty every cell with ``dx*dx + dy*dy <= radius*radius``.

    Returns the number of cells visited.
    """

    cx, cy = center
    r_sq = radius * radius
    reach = int(math.floor(radius))
    visited = 0
    for dy in range(-reach, reach + 1):
        y = cy + dy
        if not 0 <= y < terrain.height:
            continue
        half = math.isqrt(int(r_sq - dy * dy))
        left = max(0, cx - half)
        right = min(terrain.width - 1, cx + half)
        if left > right:
            continue
        run = terrain.get_mutable_run((left, y), right - left + 1)
        if run is None:
            continue
        run[:] = bytes([EMPTY]) * len(run)
        visited += len(run)
    if visited:
        terrain.changed = True
    return visited


__all__ = ["Explosion", "carve_disk"]
