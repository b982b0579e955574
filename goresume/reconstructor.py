# reconstructor.py
from dataclasses import replace

from goresume.config import ConfigError, GameConfig
from goresume.game import ENDED, Game, PositionOutOfRange
from goresume.goban_model import IllegalMove, is_valid_size
from goresume.serializer import DecodedSnapshot

DEBUG = False


class ReconstructionError(Exception): pass


class GameReconstructor:
    """
    Builds a Game from a decoded backup.

    Rule parameters (komi, ruleset, superko) come from the current defaults;
    board size and handicap stones come from the backup because the moves only
    make sense on the board they were played on. Moves are replayed without
    superko; the configured superko applies to moves played after the restore.
    """

    def reconstruct(self, decoded: DecodedSnapshot, defaults: GameConfig) -> Game:
        if not is_valid_size(decoded.board_size):
            raise ReconstructionError(f"Invalid board size {decoded.board_size!r}")
        if decoded.handicap != len(decoded.setup):
            raise ReconstructionError(
                f"Handicap {decoded.handicap} does not match {len(decoded.setup)} setup stones")
        try:
            config = replace(defaults, board_size=decoded.board_size, handicap=len(decoded.setup))
        except ConfigError as e:
            raise ReconstructionError(str(e)) from e

        game = Game(replace(config, superko=False), place_handicap=False)
        self._place_setup(game, decoded)
        self._replay(game, decoded)
        try:
            game.current_position = decoded.viewed_position
        except PositionOutOfRange as e:
            raise ReconstructionError(str(e)) from e

        game.config = config
        game.board.superko = config.superko
        if decoded.result:
            game.state = ENDED
            game.result = decoded.result
        if DEBUG:
            print("[GameReconstructor] reconstructed:", game)
        return game

    @staticmethod
    def _place_setup(game: Game, decoded: DecodedSnapshot):
        for point in decoded.setup:
            try:
                game.place_setup_stone(point)
            except IllegalMove as e:
                raise ReconstructionError(f"Setup stone {point} cannot be placed: {e}") from e

    @staticmethod
    def _replay(game: Game, decoded: DecodedSnapshot):
        for number, move in enumerate(decoded.moves, start=1):
            try:
                game.record_move(move)
            except IllegalMove as e:
                raise ReconstructionError(f"Move {number} {move} cannot be replayed: {e}") from e
