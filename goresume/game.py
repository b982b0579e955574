# game.py
from typing import Callable, List, Optional, Tuple

from goresume.config import GameConfig
from goresume.goban_model import Board, IllegalMove, Move, handicap_points, opponent

DEBUG = False

IN_PROGRESS = "in_progress"
ENDED = "ended"

Listener = Callable[[str, object], None]


class GameHasEnded(IllegalMove): pass


class PositionOutOfRange(ValueError): pass


class Game:
    """
    The active game: rules, setup stones, move history and the position the
    user is looking at.

    `current_position` is an index into the move list: 0 is the empty board
    (or the handicap setup), N is the position after N moves. All moves are
    always applied to the underlying Board; viewing an earlier position only
    moves the index.

    Listeners registered with subscribe() are called as listener(event, payload)
    for: move_committed, move_undone, moves_discarded, position_changed,
    game_ended, game_resumed.
    """

    def __init__(self, config: GameConfig, place_handicap: bool = True):
        self.config = config
        self.board = Board(size=config.board_size, superko=config.superko)
        self.setup: List[Tuple[int, int]] = []
        self.moves: List[Move] = []
        self._position = 0
        self.state = IN_PROGRESS
        self.result: Optional[str] = None
        self._listeners: List[Listener] = []
        if place_handicap:
            for point in handicap_points(config.board_size, config.handicap):
                self.place_setup_stone(point)

    # --- events ---
    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, payload=None):
        if DEBUG:
            print("[Game] event:", event, payload)
        for listener in list(self._listeners):
            listener(event, payload)

    # --- properties ---
    @property
    def size(self) -> int:
        return self.config.board_size

    @property
    def has_ended(self) -> bool:
        return self.state == ENDED

    @property
    def current_position(self) -> int:
        return self._position

    @current_position.setter
    def current_position(self, position: int):
        if not isinstance(position, int) or not 0 <= position <= len(self.moves):
            raise PositionOutOfRange(f"Position {position!r} outside 0..{len(self.moves)}")
        if position == self._position:
            return
        self._position = position
        self._emit("position_changed", position)

    @property
    def is_last_position(self) -> bool:
        return self._position == len(self.moves)

    @property
    def next_color(self) -> str:
        """Color to move after the last recorded move."""
        if self.moves:
            return opponent(self.moves[-1].color)
        return 'W' if self.setup else 'B'

    def board_at(self, position: Optional[int] = None) -> List[List[Optional[str]]]:
        if position is None:
            position = self._position
        if not 0 <= position <= len(self.moves):
            raise PositionOutOfRange(f"Position {position!r} outside 0..{len(self.moves)}")
        return self.board.get_board(position)

    # --- building ---
    def place_setup_stone(self, point: Tuple[int, int]):
        self.board.place_setup('B', point)
        self.setup.append(point)

    def record_move(self, move: Move):
        """Append a move to the history and view the resulting position. No events."""
        self.board.apply_move(move)
        self.moves.append(move)
        self._position = len(self.moves)

    # --- play ---
    def play(self, point: Tuple[int, int]) -> Move:
        return self._commit(Move(color=self._color_to_play(), point=point, is_pass=False))

    def pass_move(self) -> Move:
        return self._commit(Move(color=self._color_to_play(), point=None, is_pass=True))

    def _color_to_play(self) -> str:
        if self._position == 0:
            return 'W' if self.setup else 'B'
        return opponent(self.moves[self._position - 1].color)

    def _commit(self, move: Move) -> Move:
        if self.has_ended:
            raise GameHasEnded("Game has ended")
        discarded = self._discard_after_position()
        try:
            self.record_move(move)
        except IllegalMove:
            if discarded:
                self._replay(discarded)
            raise
        if discarded:
            self._emit("moves_discarded", discarded)
        self._emit("move_committed", move)
        return move

    def _discard_after_position(self) -> List[Move]:
        discarded = self.moves[self._position:]
        for _ in discarded:
            self.board.undo()
        del self.moves[self._position:]
        return discarded

    def _replay(self, moves: List[Move]):
        position = self._position
        for move in moves:
            self.record_move(move)
        self._position = position

    def undo(self) -> Optional[Move]:
        """Drop the last move and view the new last position."""
        if self.has_ended:
            raise GameHasEnded("Game has ended")
        if not self.moves:
            return None
        self.board.undo()
        move = self.moves.pop()
        self._position = len(self.moves)
        self._emit("move_undone", move)
        return move

    def resign(self) -> str:
        if self.has_ended:
            raise GameHasEnded("Game has ended")
        return self.end(f"{opponent(self.next_color)}+R")

    def end(self, result: str) -> str:
        self.state = ENDED
        self.result = result
        self._emit("game_ended", result)
        return result

    def undo_resign(self):
        if not self.has_ended or not (self.result or "").endswith("+R"):
            return
        self.state = IN_PROGRESS
        self.result = None
        self._emit("game_resumed", None)

    def __repr__(self):
        return (f"<Game size={self.size} komi={self.config.komi} moves={len(self.moves)} "
                f"position={self._position} state={self.state}>")


def new_game(config: GameConfig) -> Game:
    """Fresh game from the given defaults: no moves, position 0."""
    return Game(config)


class GameHolder:
    """Slot for the one active game, passed to whoever needs it."""

    def __init__(self):
        self.game: Optional[Game] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def install(self, game: Game):
        self.game = game
        for listener in list(self._listeners):
            listener("game_installed", game)
