# goban_model.py
from collections import namedtuple
import hashlib
from typing import List, Optional, Tuple

MIN_BOARD_SIZE = 2
MAX_BOARD_SIZE = 25
COLUMN_LETTERS = "ABCDEFGHJKLMNOPQRSTUVWXYZ"  # no 'I'


# Exceptions
class IllegalMove(Exception): pass


class OccupiedPoint(IllegalMove): pass


class Suicide(IllegalMove): pass


class KoViolation(IllegalMove): pass


Move = namedtuple('Move', ['color', 'point', 'is_pass'])


def opponent(color):
    return 'W' if color == 'B' else 'B'


def is_valid_size(size) -> bool:
    return isinstance(size, int) and MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE


# --- vertex notation ("D4": column letter without I, row counted from the bottom) ---
def vertex_to_point(vertex: str, size: int) -> Tuple[int, int]:
    v = vertex.strip().upper()
    if len(v) < 2 or v[0] not in COLUMN_LETTERS or not v[1:].isdigit():
        raise ValueError(f"Invalid vertex: {vertex!r}")
    c = COLUMN_LETTERS.index(v[0])
    r = size - int(v[1:])
    if not (0 <= r < size and 0 <= c < size):
        raise ValueError(f"Vertex {vertex!r} outside {size}x{size} board")
    return r, c


def point_to_vertex(point: Tuple[int, int], size: int) -> str:
    r, c = point
    return f"{COLUMN_LETTERS[c]}{size - r}"


def handicap_points(size: int, handicap: int) -> List[Tuple[int, int]]:
    """Standard star points for a fixed handicap, in placement order."""
    if handicap == 0:
        return []
    if size < 7 or not 2 <= handicap <= 9:
        raise ValueError(f"Handicap {handicap} not available on {size}x{size}")
    edge = 2 if size < 13 else 3
    lo, hi, mid = edge, size - 1 - edge, size // 2
    corners = [(hi, hi), (lo, lo), (lo, hi), (hi, lo)]
    sides = [(mid, lo), (mid, hi), (lo, mid), (hi, mid)]
    center = (mid, mid)
    if size % 2 == 0 and handicap > 4:
        raise ValueError(f"Handicap {handicap} needs an odd board size")
    if handicap <= 4:
        return corners[:handicap]
    if handicap == 5:
        return corners + [center]
    if handicap == 6:
        return corners + sides[:2]
    if handicap == 7:
        return corners + sides[:2] + [center]
    if handicap == 8:
        return corners + sides
    return corners + sides + [center]


class Board:
    def __init__(self, size=19, superko=False):
        if not is_valid_size(size):
            raise ValueError(f"Unsupported board size: {size}")
        self.size = size
        self.superko = superko
        self._board = [[None] * size for _ in range(size)]
        self.to_move = 'B'
        self.move_number = 0
        self.captures = {'B': 0, 'W': 0}
        self._history = []  # snapshot per position, index == move_number
        self.position_hashes = []  # for superko
        self._push_history_snapshot()

    # --- helpers ---
    def in_bounds(self, r, c):
        return 0 <= r < self.size and 0 <= c < self.size

    def get(self, point):
        if point is None: return None
        r, c = point
        return self._board[r][c]

    def _neighbors(self, r, c):
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nr, nc = r + dr, c + dc
            if 0 <= nr < self.size and 0 <= nc < self.size:
                yield nr, nc

    def _group_and_liberties(self, start, grid=None):
        """Return (stones_set, liberties_set) for group containing start."""
        grid = self._board if grid is None else grid
        r0, c0 = start
        color = grid[r0][c0]
        if color is None: return set(), set()
        visited = set()
        liberties = set()
        stack = [start]
        while stack:
            p = stack.pop()
            if p in visited: continue
            visited.add(p)
            r, c = p
            for nr, nc in self._neighbors(r, c):
                if grid[nr][nc] is None:
                    liberties.add((nr, nc))
                elif grid[nr][nc] == color and (nr, nc) not in visited:
                    stack.append((nr, nc))
        return visited, liberties

    def _resolve(self, move: Move):
        """Return (grid_after, captured_stone_count) for a stone move, or raise IllegalMove."""
        r, c = move.point
        if not self.in_bounds(r, c):
            raise IllegalMove("Out of bounds")
        if self._board[r][c] is not None:
            raise OccupiedPoint("Point occupied")
        grid = [row[:] for row in self._board]
        grid[r][c] = move.color
        enemy = opponent(move.color)
        captured = 0
        for nr, nc in self._neighbors(r, c):
            if grid[nr][nc] != enemy:
                continue
            stones, libs = self._group_and_liberties((nr, nc), grid)
            if not libs:
                for rr, cc in stones:
                    grid[rr][cc] = None
                captured += len(stones)
        stones, libs = self._group_and_liberties((r, c), grid)
        if not libs:
            raise Suicide("Move would be suicide")
        if self.superko and _grid_hash(grid, enemy) in self.position_hashes:
            raise KoViolation("Superko violation")
        return grid, captured

    def _push_history_snapshot(self):
        snapshot = {
            'board': [row[:] for row in self._board],
            'to_move': self.to_move,
            'move_number': self.move_number,
            'captures': dict(self.captures),
            'hash': _grid_hash(self._board, self.to_move),
        }
        self._history.append(snapshot)
        self.position_hashes.append(snapshot['hash'])

    def _restore_snapshot(self, snapshot):
        self._board = [row[:] for row in snapshot['board']]
        self.to_move = snapshot['to_move']
        self.move_number = snapshot['move_number']
        self.captures = dict(snapshot['captures'])

    def undo(self):
        if len(self._history) <= 1:
            return
        self._history.pop()
        self.position_hashes.pop()
        self._restore_snapshot(self._history[-1])

    # --- main API ---
    def place_setup(self, color, point):
        """Place a setup (handicap) stone. Only allowed before the first move."""
        if self.move_number != 0:
            raise IllegalMove("Setup stones after the first move")
        r, c = point
        if not self.in_bounds(r, c):
            raise IllegalMove("Out of bounds")
        if self._board[r][c] is not None:
            raise OccupiedPoint("Point occupied")
        self._board[r][c] = color
        self.to_move = opponent(color)
        # the setup replaces the empty-board snapshot
        self._history.pop()
        self.position_hashes.pop()
        self._push_history_snapshot()

    def apply_move(self, move: Move):
        """Apply move or raise IllegalMove subclass. Atomic: either commit or no change."""
        # the first move may be played by either color
        if self.move_number > 0 and move.color != self.to_move:
            raise IllegalMove("Wrong player to move")
        if not move.is_pass:
            grid, captured = self._resolve(move)
            self._board = grid
            self.captures[move.color] += captured
        self.move_number += 1
        self.to_move = opponent(move.color)
        self._push_history_snapshot()

    # convenience wrapper
    def play(self, color, point=None, is_pass=False):
        self.apply_move(Move(color=color, point=point, is_pass=is_pass))

    def get_board(self, position: Optional[int] = None) -> List[List[Optional[str]]]:
        """Copy of the grid at `position` (default: latest) with None/'B'/'W'."""
        if position is None:
            return [row[:] for row in self._board]
        return [row[:] for row in self._history[position]['board']]


def _grid_hash(grid, to_move):
    s = ['.' if v is None else v for row in grid for v in row]
    s.append(to_move)
    return hashlib.sha256(''.join(s).encode('utf-8')).hexdigest()
