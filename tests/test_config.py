# tests/test_config.py
import pytest

from goresume.config import (CLEANUP_ON_NEW_GAME, ConfigError, GameConfig, load_backup_settings,
                             load_env, load_game_config)

ENV_NAMES = ("BOARD_SIZE", "KOMI", "HANDICAP", "RULESET", "SUPERKO", "BACKUP_DIR", "BACKUP_FILE",
             "BACKUP_CLEANUP")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so that values loaded by load_env() are removed on teardown too
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults():
    assert load_game_config() == GameConfig(board_size=19, komi=6.5, handicap=0, ruleset="Japanese",
                                            superko=False)


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("BOARD_SIZE", "9")
    monkeypatch.setenv("KOMI", "5.5")
    monkeypatch.setenv("HANDICAP", "2")
    monkeypatch.setenv("SUPERKO", "yes")
    cfg = load_game_config()
    assert (cfg.board_size, cfg.komi, cfg.handicap, cfg.superko) == (9, 5.5, 2, True)


def test_defaults_are_reread(monkeypatch):
    monkeypatch.setenv("KOMI", "6.5")
    first = load_game_config()
    monkeypatch.setenv("KOMI", "0.5")
    assert load_game_config().komi == 0.5
    assert first.komi == 6.5


@pytest.mark.parametrize("name,value", [
    ("BOARD_SIZE", "nineteen"),
    ("BOARD_SIZE", "40"),
    ("KOMI", "x"),
    ("HANDICAP", "12"),
    ("SUPERKO", "maybe"),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        load_game_config()


def test_backup_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("BACKUP_DIR", str(tmp_path))
    monkeypatch.setenv("BACKUP_CLEANUP", "New_Game")
    settings = load_backup_settings()
    assert settings.path == str(tmp_path / "backup.sgf")
    assert settings.cleanup_policy == CLEANUP_ON_NEW_GAME


def test_unknown_cleanup_policy(monkeypatch):
    monkeypatch.setenv("BACKUP_CLEANUP", "never")
    with pytest.raises(ConfigError):
        load_backup_settings()


def test_env_file_does_not_override_environment(monkeypatch, tmp_path):
    env_file = tmp_path / "goresume.env"
    env_file.write_text("BOARD_SIZE=13\nKOMI=0.5\n")
    monkeypatch.setenv("BOARD_SIZE", "9")
    assert load_env(str(env_file))
    cfg = load_game_config()
    assert cfg.board_size == 9
    assert cfg.komi == 0.5
    assert not load_env(str(tmp_path / "missing.env"))
