# tests/conftest.py
import pytest

from goresume.config import GameConfig
from goresume.game import Game, GameHolder
from goresume.goban_model import vertex_to_point
from goresume.snapshot_store import SnapshotStore


@pytest.fixture
def store(tmp_path) -> SnapshotStore:
    return SnapshotStore(str(tmp_path / "backup" / "backup.sgf"))


@pytest.fixture
def holder() -> GameHolder:
    return GameHolder()


@pytest.fixture
def config() -> GameConfig:
    return GameConfig(board_size=19, komi=6.5)


def play_vertices(game: Game, *vertices: str) -> Game:
    """Play moves given as vertices ("D4") or "pass", alternating colors."""
    for v in vertices:
        if v == "pass":
            game.pass_move()
        else:
            game.play(vertex_to_point(v, game.size))
    return game


@pytest.fixture
def play():
    return play_vertices
