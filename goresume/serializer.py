# serializer.py
"""
Game <-> backup text.

The backup is an SGF FF[4] record with two private root properties:
  GGFV  format version of the backup (currently "1")
  GGVP  board position the user was viewing (0 = before the first move)

Example:
  (;GM[1]FF[4]CA[UTF-8]AP[goresume:0.1]GGFV[1]SZ[9]KM[6.5]HA[0]RU[Japanese]GGVP[2];B[ai];W[bh];B[])
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from goresume.config import APP_NAME, APP_VERSION
from goresume.game import Game, PositionOutOfRange
from goresume.game_tree import GameTree, SgfSyntaxError
from goresume.goban_model import Move, MAX_BOARD_SIZE, MIN_BOARD_SIZE

DEBUG = False

FORMAT_VERSION = "1"
ENCODING = "utf-8"


class MalformedSnapshotError(ValueError): pass


@dataclass
class DecodedSnapshot:
    board_size: int
    komi: float = 6.5
    handicap: int = 0
    ruleset: str = ""
    setup: List[Tuple[int, int]] = field(default_factory=list)
    moves: List[Move] = field(default_factory=list)
    viewed_position: int = 0
    result: Optional[str] = None


# --- coordinates: column letter then row letter, 'a' == 0 ---
def rc_to_sgf(point: Tuple[int, int]) -> str:
    r, c = point
    return ''.join(chr(i + ord('a')) for i in (c, r))


def sgf_to_rc(s: str, size: int) -> Tuple[int, int]:
    if len(s) != 2 or not all('a' <= ch <= 'z' for ch in s):
        raise MalformedSnapshotError(f"Invalid SGF point {s!r}")
    col = ord(s[0]) - ord('a')
    row = ord(s[1]) - ord('a')
    if not (0 <= row < size and 0 <= col < size):
        raise MalformedSnapshotError(f"SGF point {s!r} outside {size}x{size} board")
    return row, col


def _fmt_komi(komi: float) -> str:
    return f"{komi:g}"


class GameSerializer:

    def serialize(self, game: Game, last_viewed_position: int) -> bytes:
        if not 0 <= last_viewed_position <= len(game.moves):
            raise PositionOutOfRange(f"Position {last_viewed_position} outside 0..{len(game.moves)}")
        gt = GameTree()
        root = gt.new_game_node()
        cfg = game.config
        header = [
            ("GM", ["1"]), ("FF", ["4"]), ("CA", ["UTF-8"]),
            ("AP", [f"{APP_NAME}:{APP_VERSION}"]), ("GGFV", [FORMAT_VERSION]),
            ("SZ", [str(game.size)]), ("KM", [_fmt_komi(cfg.komi)]),
            ("HA", [str(len(game.setup))]), ("RU", [cfg.ruleset]),
        ]
        for k, vals in header:
            root.props.append((k, vals))
        if game.setup:
            root.props.append(("AB", [rc_to_sgf(p) for p in game.setup]))
        if game.result:
            root.props.append(("RE", [game.result]))
        root.props.append(("GGVP", [str(last_viewed_position)]))

        parent = root
        for move in game.moves:
            coord = "" if move.is_pass else rc_to_sgf(move.point)
            parent = gt.add_move(parent, move.color, coord)
        text = gt.to_sgf()
        if DEBUG:
            print("[GameSerializer] serialized:", text)
        return text.encode(ENCODING)

    def deserialize(self, raw: bytes) -> DecodedSnapshot:
        try:
            text = raw.decode(ENCODING)
        except UnicodeDecodeError as e:
            raise MalformedSnapshotError("Backup is not valid UTF-8") from e
        try:
            gt = GameTree.from_sgf(text)
        except SgfSyntaxError as e:
            raise MalformedSnapshotError(f"Backup is not valid SGF: {e}") from e

        games = gt.game_nodes()
        if len(games) != 1:
            raise MalformedSnapshotError(f"Expected exactly one game, found {len(games)}")
        nodes = gt.mainline()
        root = nodes[0]
        props = root.props_dict()

        gm = props.get("GM")
        if gm is not None and gm != ["1"]:
            raise MalformedSnapshotError(f"Not a Go record: GM{gm}")
        if props.get("GGFV") != [FORMAT_VERSION]:
            raise MalformedSnapshotError(f"Unsupported backup format: GGFV{props.get('GGFV')}")

        size = self._int_prop(props, "SZ")
        if not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
            raise MalformedSnapshotError(f"Unsupported board size {size}")
        snapshot = DecodedSnapshot(board_size=size)
        if "KM" in props:
            snapshot.komi = self._float_prop(props, "KM")
        if "HA" in props:
            snapshot.handicap = self._int_prop(props, "HA")
        snapshot.ruleset = self._text_prop(props, "RU") or ""
        snapshot.result = self._text_prop(props, "RE")
        snapshot.setup = [sgf_to_rc(v, size) for v in props.get("AB", [])]
        if "HA" not in props:
            snapshot.handicap = len(snapshot.setup)

        for node in nodes[1:]:
            snapshot.moves.append(self._decode_move(node, size))

        position = self._int_prop(props, "GGVP")
        if not 0 <= position <= len(snapshot.moves):
            raise MalformedSnapshotError(
                f"Viewed position {position} outside 0..{len(snapshot.moves)}")
        snapshot.viewed_position = position
        return snapshot

    @staticmethod
    def _decode_move(node, size: int) -> Move:
        moves = [(k, vals) for k, vals in node.props if k in ("B", "W")]
        if len(moves) != 1 or len(moves[0][1]) != 1:
            raise MalformedSnapshotError(f"Node is not a single move: {node!r}")
        color, (value,) = moves[0]
        if value == "" or (value == "tt" and size <= 19):
            return Move(color=color, point=None, is_pass=True)
        return Move(color=color, point=sgf_to_rc(value, size), is_pass=False)

    @staticmethod
    def _text_prop(props, key: str) -> Optional[str]:
        vals = props.get(key)
        if vals is None:
            return None
        if len(vals) != 1:
            raise MalformedSnapshotError(f"{key} must have exactly one value")
        return vals[0]

    def _int_prop(self, props, key: str) -> int:
        v = self._text_prop(props, key)
        if v is None:
            raise MalformedSnapshotError(f"Missing {key}")
        try:
            return int(v.strip())
        except ValueError as e:
            raise MalformedSnapshotError(f"{key} is not an integer: {v!r}") from e

    def _float_prop(self, props, key: str) -> float:
        v = self._text_prop(props, key)
        try:
            return float(v.strip())
        except ValueError as e:
            raise MalformedSnapshotError(f"{key} is not a number: {v!r}") from e
