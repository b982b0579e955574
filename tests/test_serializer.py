# tests/test_serializer.py
import pytest

from goresume.config import GameConfig
from goresume.game import Game, PositionOutOfRange
from goresume.goban_model import Move
from goresume.serializer import GameSerializer, MalformedSnapshotError

HEADER = b"(;GM[1]FF[4]CA[UTF-8]AP[goresume:0.1]GGFV[1]SZ[9]KM[6.5]HA[0]RU[Japanese]"


def test_serialize_layout(play):
    game = play(Game(GameConfig(board_size=9)), "A1", "B2", "pass")
    raw = GameSerializer().serialize(game, 2)
    assert raw == HEADER + b"GGVP[2];B[ai];W[bh];B[])"


def test_serialize_is_deterministic(play):
    game = play(Game(GameConfig(board_size=9)), "E5", "C3")
    s = GameSerializer()
    assert s.serialize(game, 1) == s.serialize(game, 1)


def test_serialize_handicap_and_result():
    game = Game(GameConfig(board_size=9, handicap=2, komi=0.5))
    game.resign()
    text = GameSerializer().serialize(game, 0).decode()
    assert "HA[2]" in text
    assert "AB[gg][cc]" in text
    assert "RE[B+R]" in text  # white, to move after the handicap, resigned
    assert "KM[0.5]" in text


def test_serialize_rejects_bad_position(play):
    game = play(Game(GameConfig(board_size=9)), "E5")
    with pytest.raises(PositionOutOfRange):
        GameSerializer().serialize(game, 2)


def test_deserialize():
    raw = HEADER + b"AB[cc]RE[B+R]GGVP[2];B[ai];W[bh];B[])"
    decoded = GameSerializer().deserialize(raw)
    assert decoded.board_size == 9
    assert decoded.komi == 6.5
    assert decoded.handicap == 0
    assert decoded.ruleset == "Japanese"
    assert decoded.setup == [(2, 2)]
    assert decoded.result == "B+R"
    assert decoded.moves == [
        Move('B', (8, 0), False),
        Move('W', (7, 1), False),
        Move('B', None, True),
    ]
    assert decoded.viewed_position == 2


def test_deserialize_accepts_tt_pass_and_ignores_variations():
    raw = HEADER + b"GGVP[1];B[tt](;W[aa])(;W[bb]))"
    decoded = GameSerializer().deserialize(raw)
    assert decoded.moves == [Move('B', None, True), Move('W', (0, 0), False)]


@pytest.mark.parametrize("raw", [
    b"\xff\xfe",
    b"",
    HEADER + b"GGVP[0];B[aa]",  # truncated
    HEADER + b"GGVP[0])(;GM[1])",  # two games
    b"(;GM[2]GGFV[1]SZ[9]GGVP[0])",  # not go
    b"(;GM[1]SZ[9]GGVP[0])",  # no format marker
    b"(;GM[1]GGFV[9]SZ[9]GGVP[0])",  # unknown format
    b"(;GM[1]GGFV[1]GGVP[0])",  # no size
    b"(;GM[1]GGFV[1]SZ[19:19]GGVP[0])",
    b"(;GM[1]GGFV[1]SZ[1]GGVP[0])",
    b"(;GM[1]GGFV[1]SZ[9]KM[lots]GGVP[0])",
    b"(;GM[1]GGFV[1]SZ[9])",  # no viewed position
    HEADER + b"GGVP[x])",
    HEADER + b"GGVP[2];B[aa])",  # position beyond moves
    HEADER + b"GGVP[-1])",
    HEADER + b"GGVP[1];B[zz])",  # off board
    HEADER + b"GGVP[1];B[a])",
    HEADER + b"GGVP[1];C[comment])",  # node without move
    HEADER + b"GGVP[1];B[aa]W[bb])",  # two moves in one node
    HEADER + b"AB[jj]GGVP[0])",
])
def test_deserialize_malformed(raw):
    with pytest.raises(MalformedSnapshotError):
        GameSerializer().deserialize(raw)
