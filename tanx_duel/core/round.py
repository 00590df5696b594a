"""Turn state machine driving a single artillery round."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple, Union

from tanx_duel.core.explosion import Explosion
from tanx_duel.core.missile import Missile
from tanx_duel.core.tank import PlacementStatus, Tank
from tanx_duel.core.terrain import Terrain

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 4
MAX_WIND = 10.0

TANK_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (245, 71, 32),
    (42, 219, 39),
    (66, 135, 245),
    (240, 200, 40),
)


class SoundSink(Protocol):
    """Fire-and-forget audio triggers used by the round."""

    def play_fire(self) -> None:
        ...

    def play_explosion(self) -> None:
        ...


class SilentSoundSink:
    def play_fire(self) -> None:
        pass

    def play_explosion(self) -> None:
        pass


@dataclass
class RoundSettings:
    """Tunable physics and layout values for a round."""

    gravity: float = 0.1
    wind_scale: float = 0.005
    power_scale: float = 0.1
    explosion_radius: float = 50.0
    explosion_growth: float = 2.0
    tank_margin: int = 100
    drop_in_y: float = 50.0
    fall_step: int = 2
    gun_length: float = 12.0
    player_count: int = 2


# ----------------------------------------------------------------------
# Phases
@dataclass(frozen=True)
class TanksThrowing:
    name = "tanks_throwing"


@dataclass(frozen=True)
class Aiming:
    name = "aiming"


@dataclass(frozen=True)
class FlyingOfMissile:
    missile: Missile
    name = "flying_of_missile"


@dataclass(frozen=True)
class Exploding:
    explosion: Explosion
    name = "exploding"


@dataclass(frozen=True)
class Subsidence:
    name = "subsidence"


GameState = Union[TanksThrowing, Aiming, FlyingOfMissile, Exploding, Subsidence]


class Round:
    """Own the terrain, the tanks and the active phase of a duel."""

    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[random.Random] = None,
        settings: Optional[RoundSettings] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.settings = settings or RoundSettings()
        self.terrain = Terrain(width, height)
        self.width = width
        self.height = height

        self.update_landscape_seed()
        self.terrain.dx = self.rng.randrange(0, max(1, width // 2))
        self.terrain.generate()

        self.tanks: List[Tank] = self._spawn_tanks()
        self.current_tank = 0
        self.state: GameState = TanksThrowing()
        self.wind_power = 0.0
        self.change_wind()

    def _spawn_tanks(self) -> List[Tank]:
        settings = self.settings
        count = max(MIN_PLAYERS, min(MAX_PLAYERS, settings.player_count))
        margin = max(0, min(settings.tank_margin, (self.width - 1) // 2))
        span = (self.width - 1 - margin) - margin
        drop_y = self._drop_in_row()
        tanks = []
        for index in range(count):
            x = margin + round(span * index / (count - 1))
            tanks.append(
                Tank(
                    x=float(x),
                    y=drop_y,
                    color=TANK_COLORS[index % len(TANK_COLORS)],
                    fall_step=settings.fall_step,
                    gun_length=settings.gun_length,
                )
            )
        return tanks

    def _drop_in_row(self) -> float:
        return float(max(0.0, min(self.settings.drop_in_y, self.height - 1)))

    # ------------------------------------------------------------------
    # Landscape & wind
    def update_landscape_seed(self) -> None:
        self.terrain.set_seed(self.rng.getrandbits(32))

    def regenerate_landscape(self) -> None:
        self.terrain.generate()
        drop_y = self._drop_in_row()
        for tank in self.tanks:
            tank.throw_down(drop_y)
        self.change_wind()
        self._enter(TanksThrowing())

    def change_wind(self) -> None:
        wind = round(self.rng.uniform(-MAX_WIND, MAX_WIND) * 10.0) / 10.0
        self.wind_power = max(-MAX_WIND, min(MAX_WIND, wind))
        logger.debug("Wind changed to %.1f", self.wind_power)

    def _enter(self, state: GameState) -> None:
        logger.debug("Phase %s -> %s", self.state.name, state.name)
        self.state = state

    # ------------------------------------------------------------------
    # Tick
    def update(self, sound: Optional[SoundSink] = None) -> None:
        if sound is None:
            sound = SilentSoundSink()
        self._update_tanks()
        self._update_missile(sound)
        self._update_explosion()
        self._update_landscape()

    def _update_tanks(self) -> None:
        if not isinstance(self.state, TanksThrowing):
            return
        all_placed = True
        for tank in self.tanks:
            all_placed &= tank.update(self.terrain) is PlacementStatus.PLACED
        if all_placed:
            self._enter(Aiming())

    def _update_missile(self, sound: SoundSink) -> None:
        if not isinstance(self.state, FlyingOfMissile):
            return
        impact = self.state.missile.update(self.terrain)
        if impact is None:
            return
        logger.debug("Missile impact at %s", impact)
        self._enter(
            Exploding(
                Explosion(
                    impact,
                    self.settings.explosion_radius,
                    growth=self.settings.explosion_growth,
                )
            )
        )
        sound.play_explosion()

    def _update_explosion(self) -> None:
        if not isinstance(self.state, Exploding):
            return
        if self.state.explosion.update(self.terrain):
            self.terrain.subsidence()
            self._enter(Subsidence())

    def _update_landscape(self) -> None:
        if not isinstance(self.state, Subsidence):
            return
        if not self.terrain.update():
            return
        self.current_tank = (self.current_tank + 1) % len(self.tanks)
        for tank in self.tanks:
            tank.throw_down(None)
        self.change_wind()
        self._enter(TanksThrowing())

    # ------------------------------------------------------------------
    # Commands
    def active_tank(self) -> Optional[Tank]:
        if 0 <= self.current_tank < len(self.tanks):
            return self.tanks[self.current_tank]
        return None

    def inc_gun_angle(self, delta: float) -> None:
        tank = self.active_tank()
        if tank is not None:
            tank.inc_angle(delta)

    def inc_gun_power(self, delta: float) -> None:
        tank = self.active_tank()
        if tank is not None:
            tank.inc_power(delta)

    def shoot(self, sound: Optional[SoundSink] = None) -> None:
        if not isinstance(self.state, Aiming):
            return
        tank = self.active_tank()
        if tank is None:
            return
        acceleration = (self.wind_power * self.settings.wind_scale, self.settings.gravity)
        missile = tank.shoot(acceleration, power_scale=self.settings.power_scale)
        self._enter(FlyingOfMissile(missile))
        if sound is None:
            sound = SilentSoundSink()
        sound.play_fire()

    # ------------------------------------------------------------------
    # Accessors
    def gun_angle(self) -> float:
        tank = self.active_tank()
        return tank.angle if tank is not None else 90.0

    def gun_power(self) -> float:
        tank = self.active_tank()
        return tank.power if tank is not None else 0.0

    def missile_speed(self) -> float:
        if isinstance(self.state, FlyingOfMissile):
            return self.state.missile.current_velocity_magnitude()
        return 0.0

    @property
    def missile(self) -> Optional[Missile]:
        if isinstance(self.state, FlyingOfMissile):
            return self.state.missile
        return None

    @property
    def explosion(self) -> Optional[Explosion]:
        if isinstance(self.state, Exploding):
            return self.state.explosion
        return None

    @property
    def phase_name(self) -> str:
        return self.state.name


__all__ = [
    "Aiming",
    "Exploding",
    "FlyingOfMissile",
    "GameState",
    "MAX_PLAYERS",
    "Round",
    "RoundSettings",
    "SilentSoundSink",
    "SoundSink",
    "Subsidence",
    "TANK_COLORS",
    "TanksThrowing",
]
