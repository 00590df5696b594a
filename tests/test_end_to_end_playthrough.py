import logging
import random
from collections import Counter

import pytest

from conftest import RecordingSink
from tanx_duel.core.round import (
    Aiming,
    Exploding,
    FlyingOfMissile,
    Round,
    RoundSettings,
    Subsidence,
    TanksThrowing,
)


class AutoPlayCommander:
    """Fire a fixed salvo each turn and log how the round reacts."""

    def __init__(self, angles=(-35.0, 20.0, 45.0), power: float = 35.0) -> None:
        self.angles = angles
        self.power = power
        self.shots_fired: Counter[int] = Counter()

    def execute_turn(self, round_: Round, sink: RecordingSink, *, logger: logging.Logger) -> None:
        ticks = self._advance(round_, Aiming, sink)
        shooter = round_.current_tank
        tank = round_.tanks[shooter]
        assert tank.is_placed
        angle = self.angles[self.shots_fired[shooter] % len(self.angles)]
        round_.inc_gun_angle(angle - round_.gun_angle())
        round_.inc_gun_power(self.power - round_.gun_power())
        logger.info(
            "Player %d placed after %d ticks at (%.0f, %.0f); firing angle=%.1f power=%.1f wind=%+.1f",
            shooter,
            ticks,
            tank.x,
            tank.y,
            round_.gun_angle(),
            round_.gun_power(),
            round_.wind_power,
        )

        round_.shoot(sink)
        self.shots_fired[shooter] += 1
        assert isinstance(round_.state, FlyingOfMissile)

        ticks = self._advance(round_, TanksThrowing, sink)
        logger.info("Turn resolved in %d ticks; next player %d", ticks, round_.current_tank)

    def play(self, round_: Round, sink: RecordingSink, turns: int, *, logger: logging.Logger) -> None:
        for turn in range(1, turns + 1):
            logger.info("---- Turn %02d ----", turn)
            self.execute_turn(round_, sink, logger=logger)
            assert round_.terrain.is_stable(), "Terrain must be settled between turns."

    @staticmethod
    def _advance(round_: Round, phase, sink: RecordingSink, limit: int = 20_000) -> int:
        for tick in range(limit):
            if isinstance(round_.state, phase):
                return tick
            round_.update(sink)
            state = round_.state
            assert (round_.missile is not None) == isinstance(state, FlyingOfMissile)
            assert (round_.explosion is not None) == isinstance(state, Exploding)
            if isinstance(state, Subsidence):
                assert round_.terrain.settling
        raise AssertionError(f"round stuck in {round_.phase_name}")


@pytest.mark.e2e
def test_automated_duel_alternates_players(caplog) -> None:
    logger = logging.getLogger("tanx_duel.e2e")
    caplog.set_level(logging.INFO, logger="tanx_duel.e2e")

    settings = RoundSettings(explosion_radius=10.0, tank_margin=30, drop_in_y=10.0, gun_length=6.0)
    round_ = Round(240, 160, rng=random.Random(2024), settings=settings)
    sink = RecordingSink()
    commander = AutoPlayCommander()

    commander.play(round_, sink, turns=6, logger=logger)

    assert commander.shots_fired == Counter({0: 3, 1: 3})
    assert round_.current_tank == 0
    assert sink.events == ["fire", "explosion"] * 6
    assert any("Turn resolved" in record.getMessage() for record in caplog.records)
