# session.py
from typing import Optional

from goresume.commands import (BackupCommand, CleanBackupCommand, DefaultsProvider, NewGameCommand,
                               RestoreCommand, RestoreState)
from goresume.config import (BackupSettings, CLEANUP_ON_GAME_END, load_backup_settings,
                             load_game_config)
from goresume.game import Game, GameHolder
from goresume.snapshot_store import SnapshotStore

DEBUG = False

BACKUP_EVENTS = ("move_committed", "move_undone", "game_resumed")


class GameSession:
    """
    Connects application lifecycle and game events to the backup commands:
      startup()  -> restore the backup or start a fresh game
      game event -> back up (moves, undo, undo resign)
      game end   -> delete the backup or keep a final one, depending on policy
      suspend()  -> back up, including the currently viewed position; an ended game
                    under the game_end policy stays without backup
      new_game() -> delete the backup and start a fresh game
    """

    def __init__(self, holder: GameHolder, store: SnapshotStore, defaults: DefaultsProvider,
                 cleanup_policy: str = CLEANUP_ON_GAME_END):
        self.holder = holder
        self.store = store
        self.defaults = defaults
        self.cleanup_policy = cleanup_policy
        self.last_backup_ok: Optional[bool] = None
        self._subscribed: Optional[Game] = None
        self.holder.subscribe(self._on_holder_event)

    @classmethod
    def from_settings(cls, settings: Optional[BackupSettings] = None,
                      defaults: DefaultsProvider = load_game_config) -> "GameSession":
        settings = settings or load_backup_settings()
        return cls(GameHolder(), SnapshotStore(settings.path), defaults, settings.cleanup_policy)

    @property
    def game(self) -> Optional[Game]:
        return self.holder.game

    # --- lifecycle ---
    def startup(self) -> RestoreState:
        outcome = RestoreCommand(self.holder, self.store, self.defaults).execute()
        if DEBUG:
            print("[GameSession] startup:", outcome.value, self.game)
        return outcome

    def suspend(self) -> bool:
        return self.backup()

    def new_game(self) -> Game:
        return NewGameCommand(self.holder, self.store, self.defaults).execute()

    def backup(self) -> bool:
        game = self.game
        if game is not None and game.has_ended and self.cleanup_policy == CLEANUP_ON_GAME_END:
            # an ended game has no backup under this policy, the next launch starts fresh
            self.last_backup_ok = CleanBackupCommand(self.store).execute()
        else:
            self.last_backup_ok = BackupCommand(self.holder, self.store).execute()
        return self.last_backup_ok

    # --- events ---
    def _on_holder_event(self, event, game):
        if event != "game_installed":
            return
        if self._subscribed is not None:
            self._subscribed.unsubscribe(self._on_game_event)
        game.subscribe(self._on_game_event)
        self._subscribed = game

    def _on_game_event(self, event, payload):
        if event in BACKUP_EVENTS:
            self.backup()
        elif event == "game_ended":
            self.backup()
