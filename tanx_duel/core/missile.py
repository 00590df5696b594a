"""Ballistic projectile stepped once per tick against the terrain."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from tanx_duel.core.terrain import Terrain

Vector = Tuple[float, float]


@dataclass
class Missile:
    """Projectile with constant acceleration (wind horizontally, gravity down)."""

    position: Vector
    velocity: Vector
    acceleration: Vector
    impact: Optional[Tuple[int, int]] = field(default=None, init=False)

    @property
    def finished(self) -> bool:
        return self.impact is not None

    def current_velocity_magnitude(self) -> float:
        return math.hypot(*self.velocity)

    def update(self, terrain: Terrain) -> Optional[Tuple[int, int]]:
        """Advance one tick and return the impact cell if the flight ended."""

        if self.impact is not None:
            return None
        x0, y0 = self.position
        vx, vy = self.velocity
        ax, ay = self.acceleration
        x1, y1 = x0 + vx, y0 + vy
        self.position = (x1, y1)
        self.velocity = (vx + ax, vy + ay)

        # Every cell along the travelled segment is tested, not just the end point.
        steps = max(1, int(math.ceil(max(abs(vx), abs(vy)))))
        for step in range(1, steps + 1):
            t = step / steps
            cx = int(round(x0 + vx * t))
            cy = int(round(y0 + vy * t))
            if cx < 0 or cx >= terrain.width or cy >= terrain.height:
                self.impact = (cx, cy)
                break
            if cy < 0:
                continue
            if terrain.is_not_empty(cx, cy):
                self.impact = (cx, cy)
                break
        if self.impact is not None:
            self.position = (float(self.impact[0]), float(self.impact[1]))
        return self.impact


__all__ = ["Missile", "Vector"]
