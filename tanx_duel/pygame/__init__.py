"""Pygame host for the Tanx Duel simulation core."""

from tanx_duel.pygame.app import PygameDuel, run_pygame
from tanx_duel.pygame.soundscape import Soundscape

__all__ = ["PygameDuel", "Soundscape", "run_pygame"]
