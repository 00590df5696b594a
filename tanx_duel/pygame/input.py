"""Translate pygame keyboard state into round commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pygame

from tanx_duel.core.round import Round, SoundSink


@dataclass
class KeyBindings:
    angle_left: int = pygame.K_LEFT
    angle_right: int = pygame.K_RIGHT
    power_up: int = pygame.K_UP
    power_down: int = pygame.K_DOWN
    fire: int = pygame.K_SPACE
    new_landscape: int = pygame.K_n
    quit: int = pygame.K_ESCAPE


class InputHandler:
    """Apply held keys every frame and one-shot keys on key down."""

    def __init__(self, bindings: Optional[KeyBindings] = None) -> None:
        self.bindings = bindings or KeyBindings()
        self._held_keys: set[int] = set()
        self._fast = False
        self.quit_requested = False

    def process_event(self, event: pygame.event.Event, round_: Round, sound: SoundSink) -> None:
        if event.type == pygame.KEYDOWN:
            self._held_keys.add(event.key)
            self._fast = bool(getattr(event, "mod", 0) & pygame.KMOD_SHIFT)
            if event.key == self.bindings.fire:
                round_.shoot(sound)
            elif event.key == self.bindings.new_landscape:
                round_.update_landscape_seed()
                round_.regenerate_landscape()
            elif event.key == self.bindings.quit:
                self.quit_requested = True
        elif event.type == pygame.KEYUP:
            self._held_keys.discard(event.key)
            if event.key in {pygame.K_LSHIFT, pygame.K_RSHIFT}:
                self._fast = False

    def apply_held(self, round_: Round) -> None:
        angle_step = 2.0 if self._fast else 0.5
        power_step = 1.0 if self._fast else 0.25
        held = self._held_keys
        if self.bindings.angle_left in held:
            round_.inc_gun_angle(-angle_step)
        if self.bindings.angle_right in held:
            round_.inc_gun_angle(angle_step)
        if self.bindings.power_up in held:
            round_.inc_gun_power(power_step)
        if self.bindings.power_down in held:
            round_.inc_gun_power(-power_step)


__all__ = ["InputHandler", "KeyBindings"]
