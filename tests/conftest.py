import random
from typing import List

import pytest

from tanx_duel.core.round import Round, RoundSettings
from tanx_duel.core.terrain import Terrain


class RecordingSink:
    """Sound sink that records which cues the round triggered."""

    def __init__(self) -> None:
        self.events: List[str] = []

    def play_fire(self) -> None:
        self.events.append("fire")

    def play_explosion(self) -> None:
        self.events.append("explosion")


def make_flat_terrain(width: int = 10, height: int = 10, row: int = 8) -> Terrain:
    terrain = Terrain(width, height)
    terrain.fill_run((0, row), width, True)
    return terrain


@pytest.fixture
def flat_terrain() -> Terrain:
    """10x10 terrain whose only solid cells form row 8."""

    return make_flat_terrain()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def small_settings() -> RoundSettings:
    return RoundSettings(
        explosion_radius=6.0,
        explosion_growth=2.0,
        tank_margin=20,
        drop_in_y=5.0,
        gun_length=4.0,
    )


@pytest.fixture
def small_round(rng: random.Random, small_settings: RoundSettings) -> Round:
    return Round(120, 80, rng=rng, settings=small_settings)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
