# config.py
"""
New-game defaults and backup settings.

Configuration comes from goresume.env via python-dotenv. Values already
present in the process environment win over the file (override=False), so a
launcher or a test can set BOARD_SIZE=9 without touching the file.

The loaders read the environment on every call: defaults changed between
sessions are picked up by the next restore or new game.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from goresume.goban_model import is_valid_size, handicap_points

APP_NAME = "goresume"
APP_VERSION = "0.1"
ENV_PATH = os.path.join(os.path.dirname(__file__), "goresume.env")

CLEANUP_ON_GAME_END = "game_end"
CLEANUP_ON_NEW_GAME = "new_game"
CLEANUP_POLICIES = (CLEANUP_ON_GAME_END, CLEANUP_ON_NEW_GAME)


class ConfigError(ValueError): pass


def load_env(path: str = ENV_PATH) -> bool:
    # Allow running without file for convenience
    if os.path.exists(path):
        return load_dotenv(path, override=False)
    return False


load_env()


# Helpers to read env with defaults
def getf(name: str, default: float) -> float:
    v = os.getenv(name)
    try:
        return float(v) if v is not None else float(default)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {v!r}") from e


def geti(name: str, default: int) -> int:
    v = os.getenv(name)
    try:
        return int(v) if v is not None else int(default)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {v!r}") from e


def gets(name: str, default: str) -> str:
    v = os.getenv(name)
    return v if v is not None else default


def getb(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    if v.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if v.strip().lower() in ("0", "false", "no", "off", ""):
        return False
    raise ConfigError(f"{name} must be a boolean, got {v!r}")


@dataclass(frozen=True)
class GameConfig:
    board_size: int = 19
    komi: float = 6.5
    handicap: int = 0
    ruleset: str = "Japanese"
    superko: bool = False

    def __post_init__(self):
        if not is_valid_size(self.board_size):
            raise ConfigError(f"Unsupported board size: {self.board_size}")
        try:
            handicap_points(self.board_size, self.handicap)
        except ValueError as e:
            raise ConfigError(str(e)) from e


@dataclass(frozen=True)
class BackupSettings:
    backup_dir: str
    file_name: str = "backup.sgf"
    cleanup_policy: str = CLEANUP_ON_GAME_END

    @property
    def path(self) -> str:
        return os.path.join(self.backup_dir, self.file_name)


def default_backup_dir() -> str:
    data_home = os.getenv("XDG_DATA_HOME") or os.path.join(os.path.expanduser("~"), ".local", "share")
    return os.path.join(data_home, APP_NAME)


def load_game_config() -> GameConfig:
    """Current "new game" defaults."""
    return GameConfig(
        board_size=geti("BOARD_SIZE", 19),
        komi=getf("KOMI", 6.5),
        handicap=geti("HANDICAP", 0),
        ruleset=gets("RULESET", "Japanese"),
        superko=getb("SUPERKO", False),
    )


def load_backup_settings() -> BackupSettings:
    policy = gets("BACKUP_CLEANUP", CLEANUP_ON_GAME_END).strip().lower()
    if policy not in CLEANUP_POLICIES:
        raise ConfigError(f"BACKUP_CLEANUP must be one of {CLEANUP_POLICIES}, got {policy!r}")
    return BackupSettings(
        backup_dir=os.path.expanduser(gets("BACKUP_DIR", default_backup_dir())),
        file_name=gets("BACKUP_FILE", "backup.sgf"),
        cleanup_policy=policy,
    )
