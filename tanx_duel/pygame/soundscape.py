"""pygame.mixer backed sound sink for the round's fire and explosion cues."""

from __future__ import annotations

import logging
import math
import os
from array import array
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pygame

logger = logging.getLogger(__name__)

FIRE_SOUND = "cannon_fire.ogg"
EXPLOSION_SOUND = "explosion1.ogg"

# key -> (frequency, duration, harmonics)
_PLACEHOLDER_TONES: Dict[str, Tuple[float, float, List[Tuple[float, float]]]] = {
    "fire": (440.0, 0.25, [(1.0, 0.8), (1.5, 0.2)]),
    "explosion": (110.0, 0.6, [(1.0, 0.6), (0.5, 0.3), (2.0, 0.1)]),
}


class Soundscape:
    """Play the two round cues, degrading to silence without an audio device."""

    def __init__(
        self,
        base_path: Path,
        *,
        enabled: bool = True,
        volume: float = 1.0,
        frequency: int = 44_100,
        size: int = -16,
        channels: int = 2,
        buffer: int = 512,
    ) -> None:
        self.base_path = Path(base_path)
        self.enabled = enabled
        self.volume = max(0.0, min(1.0, volume))
        self._mixer_ready = False
        self._registry: Dict[str, pygame.mixer.Sound] = {}
        self._status_message: Optional[str] = None
        self._active_driver: Optional[str] = None
        self._init_params = {
            "frequency": frequency,
            "size": size,
            "channels": channels,
            "buffer": buffer,
        }
        if not enabled:
            return
        self._initialise_mixer()
        if self._mixer_ready:
            self.load("fire", FIRE_SOUND)
            self.load("explosion", EXPLOSION_SOUND)

    # ------------------------------------------------------------------
    # SoundSink
    def play_fire(self) -> None:
        self.play("fire")

    def play_explosion(self) -> None:
        self.play("explosion")

    # ------------------------------------------------------------------
    # Loading & playback
    def load(self, key: str, filename: str) -> None:
        if not self._mixer_ready:
            return
        path = self.base_path / filename
        sound: Optional[pygame.mixer.Sound] = None
        if path.is_file():
            try:
                sound = pygame.mixer.Sound(path.as_posix())
            except pygame.error as exc:
                logger.warning("Could not load '%s': %s", path, exc)
        if sound is None:
            logger.info("Missing audio asset '%s', using placeholder tone.", filename)
            sound = self._create_placeholder_sound(key)
        if sound is not None:
            self._registry[key] = sound

    def play(self, key: str) -> None:
        if not self._mixer_ready:
            return
        sound = self._registry.get(key)
        if sound is None:
            return
        sound.set_volume(self.volume)
        sound.play()

    def set_volume(self, value: float) -> None:
        self.volume = max(0.0, min(1.0, value))

    @property
    def status_message(self) -> Optional[str]:
        return self._status_message

    @property
    def ready(self) -> bool:
        return self._mixer_ready

    # ------------------------------------------------------------------
    # Mixer bootstrap
    def _initialise_mixer(self) -> None:
        original_driver = os.environ.get("SDL_AUDIODRIVER")
        last_error: Optional[str] = None
        for driver in self._candidate_drivers(original_driver):
            try:
                self._apply_driver_env(driver)
                pygame.mixer.quit()
                pygame.mixer.init(**self._init_params)
            except pygame.error as exc:
                last_error = str(exc)
                continue
            self._mixer_ready = True
            self._active_driver = driver if driver is not None else os.environ.get(
                "SDL_AUDIODRIVER"
            )
            if self._active_driver == "dummy":
                self._set_status_message(
                    "Audio device unavailable; running with SDL 'dummy' driver (no sound output)."
                )
            break
        self._restore_driver_env(original_driver)

        if not self._mixer_ready:
            reason = f": {last_error}" if last_error else ""
            self._set_status_message(f"Audio initialisation failed{reason}. Sound remains muted.")

    def _candidate_drivers(self, original: Optional[str]) -> List[Optional[str]]:
        if original:
            return [original]
        return [None, "pulse", "pipewire", "alsa", "coreaudio", "directsound", "wasapi", "dummy"]

    def _apply_driver_env(self, driver: Optional[str]) -> None:
        if driver is None:
            os.environ.pop("SDL_AUDIODRIVER", None)
        else:
            os.environ["SDL_AUDIODRIVER"] = driver

    def _restore_driver_env(self, original: Optional[str]) -> None:
        if original is None:
            os.environ.pop("SDL_AUDIODRIVER", None)
        else:
            os.environ["SDL_AUDIODRIVER"] = original

    def _set_status_message(self, message: Optional[str]) -> None:
        if message and message != self._status_message:
            logger.warning("[Soundscape] %s", message)
        self._status_message = message

    def _create_placeholder_sound(self, key: str) -> Optional[pygame.mixer.Sound]:
        init = pygame.mixer.get_init()
        if not init:
            return None
        sample_rate, size, channels = init
        if abs(size) != 16:
            return None

        base_freq, duration, harmonics = _PLACEHOLDER_TONES.get(
            key, (330.0, 0.3, [(1.0, 1.0)])
        )
        total_samples = max(1, int(sample_rate * duration))
        attack = max(1, int(total_samples * 0.03))
        release = max(1, int(total_samples * 0.3))
        scale = int(32767 * 0.6)

        wave = array("h")
        for index in range(total_samples):
            t = index / sample_rate
            envelope = 1.0
            if index < attack:
                envelope = index / attack
            elif index > total_samples - release:
                envelope = max(0.0, (total_samples - index) / release)
            value = sum(
                weight * math.sin(2.0 * math.pi * base_freq * harmonic * t)
                for harmonic, weight in harmonics
            )
            wave.append(int(scale * max(-1.0, min(1.0, value)) * envelope))

        if channels == 2:
            stereo = array("h")
            for sample in wave:
                stereo.extend([sample, sample])
            data = stereo.tobytes()
        else:
            data = wave.tobytes()

        try:
            return pygame.mixer.Sound(buffer=data)
        except pygame.error:
            return None


__all__ = ["EXPLOSION_SOUND", "FIRE_SOUND", "Soundscape"]
