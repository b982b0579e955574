# tests/test_snapshot_store.py
import os

import pytest

from goresume.snapshot_store import SnapshotStore, StorageError


def test_missing_backup(store):
    assert not store.exists()
    with pytest.raises(StorageError):
        store.read()


def test_write_creates_directory_and_replaces(store):
    store.write(b"first")
    assert store.exists()
    store.write(b"second")
    assert store.read() == b"second"
    assert not os.path.exists(store.path + ".tmp")


def test_delete_is_idempotent(store):
    store.write(b"data")
    store.delete()
    assert not store.exists()
    store.delete()
    assert not store.exists()


def test_write_failure_raises_and_keeps_old_backup(store, monkeypatch):
    store.write(b"old")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)
    with pytest.raises(StorageError):
        store.write(b"new")
    monkeypatch.undo()
    assert store.read() == b"old"
    assert not os.path.exists(store.path + ".tmp")


def test_directory_in_place_of_backup_is_not_a_backup(tmp_path):
    (tmp_path / "backup.sgf").mkdir()
    store = SnapshotStore(str(tmp_path / "backup.sgf"))
    assert not store.exists()
    with pytest.raises(StorageError):
        store.write(b"data")
