import pygame
import pytest

from tanx_duel.core.round import Aiming, FlyingOfMissile, RoundSettings, TanksThrowing
from tanx_duel.pygame import PygameDuel, config
from tanx_duel.pygame.input import InputHandler


def _headless(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    monkeypatch.setattr(config, "_SETTINGS_PATH", tmp_path / "user_settings.json", raising=False)


def _key(key: int, mod: int = 0) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, key=key, mod=mod)


@pytest.mark.smoke
def test_pygame_client_initialises(monkeypatch, tmp_path) -> None:
    """Ensure the graphical client can boot and tick in a headless environment."""

    _headless(monkeypatch, tmp_path)
    app = None
    try:
        app = PygameDuel(160, 120, seed=3, audio_path=tmp_path)
        app.step()
        surface = app.terrain_surface()
        assert surface.get_size() == (160, 120)
        assert app.round.terrain.changed is False
    finally:
        if app:
            app.running = False
        pygame.quit()


@pytest.mark.smoke
def test_keys_drive_round_commands(monkeypatch, tmp_path) -> None:
    _headless(monkeypatch, tmp_path)
    app = None
    try:
        settings = RoundSettings(tank_margin=20, drop_in_y=5.0, gun_length=4.0)
        app = PygameDuel(160, 120, seed=5, settings=settings, audio_path=tmp_path)
        round_ = app.round
        for _ in range(500):
            if isinstance(round_.state, Aiming):
                break
            round_.update()
        assert isinstance(round_.state, Aiming)

        handler = InputHandler()
        handler.process_event(_key(pygame.K_RIGHT, pygame.KMOD_SHIFT), round_, app.soundscape)
        handler.apply_held(round_)
        assert round_.gun_angle() == 2.0

        handler.process_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_RIGHT), round_, app.soundscape)
        handler.process_event(_key(pygame.K_SPACE), round_, app.soundscape)
        assert isinstance(round_.state, FlyingOfMissile)

        handler.process_event(_key(pygame.K_n), round_, app.soundscape)
        assert isinstance(round_.state, TanksThrowing)
        assert round_.missile is None

        handler.process_event(_key(pygame.K_ESCAPE), round_, app.soundscape)
        assert handler.quit_requested
    finally:
        if app:
            app.running = False
        pygame.quit()


def test_user_settings_round_trip(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(config, "_SETTINGS_PATH", tmp_path / "user_settings.json", raising=False)

    assert config.load_user_settings() == config.DEFAULT_SETTINGS
    config.save_user_settings({"fps": 30, "volume": 0.5})

    assert config.load_user_settings() == {"fps": 30, "volume": 0.5}


def test_corrupt_user_settings_fall_back_to_defaults(monkeypatch, tmp_path) -> None:
    path = tmp_path / "user_settings.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setattr(config, "_SETTINGS_PATH", path, raising=False)

    assert config.load_user_settings() == config.DEFAULT_SETTINGS
