# commands.py
"""
Backup and restore of the game in progress.

RestoreCommand runs once at startup and always leaves an active game in the
holder: the backed-up game if the backup can be read, decoded and replayed,
otherwise a fresh game from the current defaults. BackupCommand runs after
each state-changing event and when the application is suspended.
"""
from enum import Enum
from typing import Callable, List, Optional

from goresume.config import ConfigError, GameConfig
from goresume.game import Game, GameHolder, new_game
from goresume.reconstructor import GameReconstructor, ReconstructionError
from goresume.serializer import DecodedSnapshot, GameSerializer, MalformedSnapshotError
from goresume.snapshot_store import SnapshotStore, StorageError

DEBUG = False

DefaultsProvider = Callable[[], GameConfig]


class BackupCommand:

    def __init__(self, holder: GameHolder, store: SnapshotStore, serializer: Optional[GameSerializer] = None):
        self.holder = holder
        self.store = store
        self.serializer = serializer or GameSerializer()

    def execute(self) -> bool:
        """Write the active game and its viewed position. Returns False if nothing was written."""
        game = self.holder.game
        if game is None:
            if DEBUG:
                print("[BackupCommand] no active game")
            return False
        raw = self.serializer.serialize(game, game.current_position)
        try:
            self.store.write(raw)
        except StorageError as e:
            print("[BackupCommand] backup failed, game continues without backup:", e)
            return False
        if DEBUG:
            print("[BackupCommand] backed up", game)
        return True


class CleanBackupCommand:

    def __init__(self, store: SnapshotStore):
        self.store = store

    def execute(self) -> bool:
        try:
            self.store.delete()
        except StorageError as e:
            print("[CleanBackupCommand] failed to delete backup:", e)
            return False
        if DEBUG:
            print("[CleanBackupCommand] backup removed")
        return True


class NewGameCommand:
    """Discard the backup and start a fresh game from the current defaults."""

    def __init__(self, holder: GameHolder, store: SnapshotStore, defaults: DefaultsProvider):
        self.holder = holder
        self.store = store
        self.defaults = defaults

    def execute(self) -> Game:
        CleanBackupCommand(self.store).execute()
        game = new_game(self.defaults())
        self.holder.install(game)
        return game


class RestoreState(Enum):
    START = "start"
    READING = "reading"
    DECODING = "decoding"
    RECONSTRUCTING = "reconstructing"
    RESTORED = "restored"
    FRESH_GAME = "fresh_game"


TERMINAL_STATES = (RestoreState.RESTORED, RestoreState.FRESH_GAME)


class RestoreCommand:
    """
    START -> READING -> DECODING -> RECONSTRUCTING -> RESTORED

    No backup, or a backup that cannot be read, goes to FRESH_GAME and the
    file is left alone. A backup that cannot be decoded or replayed is deleted
    before going to FRESH_GAME so it is not retried on every launch.
    """

    def __init__(self, holder: GameHolder, store: SnapshotStore, defaults: DefaultsProvider,
                 serializer: Optional[GameSerializer] = None,
                 reconstructor: Optional[GameReconstructor] = None):
        self.holder = holder
        self.store = store
        self.defaults = defaults
        self.serializer = serializer or GameSerializer()
        self.reconstructor = reconstructor or GameReconstructor()
        self.transitions: List[RestoreState] = []
        self._raw: Optional[bytes] = None
        self._decoded: Optional[DecodedSnapshot] = None
        self._game: Optional[Game] = None

    def execute(self) -> RestoreState:
        state = RestoreState.START
        self.transitions = [state]
        steps = {
            RestoreState.START: self._start,
            RestoreState.READING: self._read,
            RestoreState.DECODING: self._decode,
            RestoreState.RECONSTRUCTING: self._reconstruct,
        }
        while state not in TERMINAL_STATES:
            state = steps[state]()
            self.transitions.append(state)
            if DEBUG:
                print("[RestoreCommand] ->", state.value)

        if state is RestoreState.FRESH_GAME:
            self._game = new_game(self._current_defaults())
        self.holder.install(self._game)
        return state

    def _current_defaults(self) -> GameConfig:
        try:
            return self.defaults()
        except ConfigError as e:
            print("[RestoreCommand] invalid new-game defaults, using built-in ones:", e)
            return GameConfig()

    # --- steps: each returns the next state ---
    def _start(self) -> RestoreState:
        if self.store.exists():
            return RestoreState.READING
        return RestoreState.FRESH_GAME

    def _read(self) -> RestoreState:
        try:
            self._raw = self.store.read()
        except StorageError as e:
            print("[RestoreCommand] backup unreadable, starting a new game:", e)
            return RestoreState.FRESH_GAME
        return RestoreState.DECODING

    def _decode(self) -> RestoreState:
        try:
            self._decoded = self.serializer.deserialize(self._raw)
        except MalformedSnapshotError as e:
            print("[RestoreCommand] backup is corrupt, discarding it:", e)
            self._discard_backup()
            return RestoreState.FRESH_GAME
        return RestoreState.RECONSTRUCTING

    def _reconstruct(self) -> RestoreState:
        try:
            self._game = self.reconstructor.reconstruct(self._decoded, self._current_defaults())
        except ReconstructionError as e:
            print("[RestoreCommand] backup cannot be replayed, discarding it:", e)
            self._discard_backup()
            return RestoreState.FRESH_GAME
        return RestoreState.RESTORED

    def _discard_backup(self):
        CleanBackupCommand(self.store).execute()
