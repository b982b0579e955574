# snapshot_store.py
import os

DEBUG = False


class StorageError(Exception): pass


class SnapshotStore:
    """
    The single backup file. Its presence means "a game was in progress".
    Writes go to a temporary sibling that is renamed over the backup, so a
    crash mid-write leaves either the old or the new backup, never a mix.
    """

    def __init__(self, path: str):
        self.path = path
        self._tmp_path = path + ".tmp"

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def read(self) -> bytes:
        try:
            with open(self.path, "rb") as fp:
                data = fp.read()
        except OSError as e:
            raise StorageError(f"Cannot read backup {self.path}: {e}") from e
        if DEBUG:
            print("[SnapshotStore] read", len(data), "bytes from", self.path)
        return data

    def write(self, raw: bytes) -> None:
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._tmp_path, "wb") as fp:
                fp.write(raw)
                fp.flush()
                os.fsync(fp.fileno())
            os.replace(self._tmp_path, self.path)
        except OSError as e:
            self._remove_tmp()
            raise StorageError(f"Cannot write backup {self.path}: {e}") from e
        if DEBUG:
            print("[SnapshotStore] wrote", len(raw), "bytes to", self.path)

    def delete(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Cannot delete backup {self.path}: {e}") from e
        if DEBUG:
            print("[SnapshotStore] deleted", self.path)

    def _remove_tmp(self):
        try:
            os.remove(self._tmp_path)
        except OSError:
            pass
