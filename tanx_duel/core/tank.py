"""Tank entity: aim state and drop-to-ground placement."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from tanx_duel.core.missile import Missile
from tanx_duel.core.terrain import Terrain

MIN_ANGLE = -90.0
MAX_ANGLE = 90.0
MIN_POWER = 0.0
MAX_POWER = 100.0


class PlacementStatus(enum.Enum):
    PLACED = "placed"
    FALLING = "falling"


@dataclass
class Tank:
    """A player-controlled tank.

    ``angle`` is measured from vertical: 0 points straight up, positive values
    tilt the gun to the right.
    """

    x: float
    y: float
    color: Tuple[int, int, int]
    angle: float = 0.0
    power: float = 50.0
    fall_step: int = 2
    gun_length: float = 12.0
    placed: bool = field(default=False, init=False)

    @property
    def cell(self) -> Tuple[int, int]:
        return int(round(self.x)), int(round(self.y))

    @property
    def is_placed(self) -> bool:
        return self.placed

    # ------------------------------------------------------------------
    # Aiming
    def set_angle(self, angle: float) -> None:
        self.angle = max(MIN_ANGLE, min(MAX_ANGLE, angle))

    def set_power(self, power: float) -> None:
        self.power = max(MIN_POWER, min(MAX_POWER, power))

    def inc_angle(self, delta: float) -> None:
        self.set_angle(self.angle + delta)

    def inc_power(self, delta: float) -> None:
        self.set_power(self.power + delta)

    def direction(self) -> Tuple[float, float]:
        radians = math.radians(self.angle)
        return math.sin(radians), -math.cos(radians)

    def muzzle(self) -> Tuple[float, float]:
        dir_x, dir_y = self.direction()
        return self.x + dir_x * self.gun_length, self.y - 1 + dir_y * self.gun_length

    def shoot(
        self,
        acceleration: Tuple[float, float],
        *,
        power_scale: float = 0.1,
    ) -> Missile:
        speed = self.power * power_scale
        dir_x, dir_y = self.direction()
        return Missile(
            position=self.muzzle(),
            velocity=(dir_x * speed, dir_y * speed),
            acceleration=acceleration,
        )

    # ------------------------------------------------------------------
    # Placement
    def throw_down(self, y: Optional[float] = None) -> PlacementStatus:
        """Start falling again, optionally from row ``y``."""

        if y is not None:
            self.y = y
        self.placed = False
        return PlacementStatus.FALLING

    def update(self, terrain: Terrain) -> PlacementStatus:
        if self.placed:
            return PlacementStatus.PLACED
        x, y = self.cell
        bottom = terrain.height - 1
        if terrain.is_not_empty(x, y):
            surface = terrain.column_surface(x)
            if surface == 0:
                # Solid up to the top row: there is no empty cell to stand in.
                self.y = 0.0
                return PlacementStatus.FALLING
            self.y = float(surface - 1)
            return self._settle(terrain)
        y = max(y, 0)
        for _ in range(max(1, self.fall_step)):
            if y >= bottom or terrain.is_not_empty(x, y + 1):
                break
            y += 1
        self.y = float(min(y, bottom))
        return self._settle(terrain)

    def _settle(self, terrain: Terrain) -> PlacementStatus:
        x, y = self.cell
        if y >= terrain.height - 1 or terrain.is_not_empty(x, y + 1):
            self.placed = True
            return PlacementStatus.PLACED
        return PlacementStatus.FALLING


__all__ = ["MAX_ANGLE", "MAX_POWER", "MIN_ANGLE", "MIN_POWER", "PlacementStatus", "Tank"]
