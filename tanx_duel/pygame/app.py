"""Pygame host loop for the Tanx Duel round."""

from __future__ import annotations

import logging
import math
import random
from pathlib import Path
from typing import Optional

try:
    import pygame
except ImportError as exc:  # pragma: no cover - depends on runtime environment
    raise RuntimeError(
        "The pygame package is required to run the graphical version of Tanx Duel."
    ) from exc

from tanx_duel.core.round import Round, RoundSettings
from tanx_duel.core.tank import Tank
from tanx_duel.pygame.config import load_user_settings, save_user_settings
from tanx_duel.pygame.input import InputHandler
from tanx_duel.pygame.soundscape import Soundscape

logger = logging.getLogger(__name__)

BACKGROUND = (12, 18, 32)
HUD_COLOR = (220, 220, 220)
TANK_SIZE = (14, 7)


class PygameDuel:
    """Window, input and drawing around a :class:`Round`."""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        *,
        seed: Optional[int] = None,
        settings: Optional[RoundSettings] = None,
        audio_path: Optional[Path] = None,
    ) -> None:
        pygame.init()
        pygame.font.init()
        self._user_settings = load_user_settings()

        self.round = Round(width, height, rng=random.Random(seed), settings=settings)
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Tanx Duel")
        self.font = pygame.font.SysFont("consolas", 16)
        self.clock = pygame.time.Clock()
        self.fps = int(self._user_settings.get("fps", 60))
        self.running = True

        audio_path = audio_path or Path(__file__).resolve().parent / "assets" / "audio"
        self.soundscape = Soundscape(
            audio_path, volume=float(self._user_settings.get("volume", 1.0))
        )
        self.input = InputHandler()
        self._terrain_surface: Optional[pygame.Surface] = None
        logger.debug(
            "Opened %dx%d duel with %d tanks at %d fps", width, height, len(self.round.tanks), self.fps
        )

    # ------------------------------------------------------------------
    def run(self) -> None:
        try:
            while self.running:
                self.step()
                self.clock.tick(self.fps)
        finally:
            save_user_settings(
                {**self._user_settings, "volume": self.soundscape.volume, "fps": self.fps}
            )
            pygame.quit()

    def step(self) -> None:
        """Handle pending events, advance one tick and redraw."""

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            else:
                self.input.process_event(event, self.round, self.soundscape)
        if self.input.quit_requested:
            self.running = False
        self.input.apply_held(self.round)
        self.round.update(self.soundscape)
        self.draw()
        pygame.display.flip()

    # ------------------------------------------------------------------
    # Drawing
    def terrain_surface(self) -> pygame.Surface:
        terrain = self.round.terrain
        if self._terrain_surface is None or terrain.changed:
            self._terrain_surface = pygame.image.frombuffer(
                terrain.to_pixel_buffer(), terrain.size, "RGBA"
            ).convert_alpha()
            terrain.changed = False
        return self._terrain_surface

    def draw(self) -> None:
        screen = self.screen
        screen.fill(BACKGROUND)
        screen.blit(self.terrain_surface(), (0, 0))
        for tank in self.round.tanks:
            self._draw_tank(tank)
        missile = self.round.missile
        if missile is not None:
            mx, my = missile.position
            pygame.draw.circle(screen, (255, 255, 255), (int(mx), int(my)), 2)
        explosion = self.round.explosion
        if explosion is not None and explosion.radius > 0:
            pygame.draw.circle(
                screen, (255, 200, 80), explosion.center, int(explosion.radius), width=1
            )
        self._draw_hud()

    def _draw_tank(self, tank: Tank) -> None:
        w, h = TANK_SIZE
        body = pygame.Rect(0, 0, w, h)
        body.midbottom = (int(tank.x), int(tank.y) + 1)
        pygame.draw.rect(self.screen, tank.color, body)
        pivot = (tank.x, tank.y - 1)
        radians = math.radians(tank.angle)
        end = (
            pivot[0] + math.sin(radians) * tank.gun_length,
            pivot[1] - math.cos(radians) * tank.gun_length,
        )
        pygame.draw.line(self.screen, tank.color, pivot, end, 3)

    def _draw_hud(self) -> None:
        round_ = self.round
        lines = [
            f"Player {round_.current_tank + 1}",
            f"Angle: {round_.gun_angle():5.1f}",
            f"Power: {round_.gun_power():5.1f}",
            f"Wind:  {round_.wind_power:+5.1f}",
            f"Speed: {round_.missile_speed():5.2f}",
        ]
        for index, text in enumerate(lines):
            surface = self.font.render(text, True, HUD_COLOR)
            self.screen.blit(surface, (8, 8 + index * 18))


def run_pygame(
    width: int = 800,
    height: int = 600,
    *,
    seed: Optional[int] = None,
    settings: Optional[RoundSettings] = None,
) -> None:
    PygameDuel(width, height, seed=seed, settings=settings).run()


__all__ = ["PygameDuel", "run_pygame"]
