"""
Unit tests for the Key Store module.

Tests:
- Reading key files (missing, empty, corrupt)
- Atomic writes with owner-only permissions
- Overwrite protection
"""

import os
import stat
import sys

import pytest

from privatemessenger.errors import (
    InvalidKeyError, KeyFileNotFoundError, EmptyKeyError,
    KeyFileExistsError, KeyWriteError, ErrorKind
)
from privatemessenger.files.key_store import (
    key_exists, read_private_key, restore_from_file, write_private_key, KEY_FILE_MODE
)
from privatemessenger.messaging.key_agreement import export_private, export_public


class TestReadKey:
    """Tests for loading private keys from disk."""

    def test_missing_file(self, tmp_path, suite):
        """Absent file raises a FileNotFoundError."""
        path = tmp_path / "missing"
        with pytest.raises(KeyFileNotFoundError) as exc:
            restore_from_file(path, suite)
        assert isinstance(exc.value, FileNotFoundError)
        assert exc.value.kind is ErrorKind.KEY_FILE_NOT_FOUND
        assert str(path) in str(exc.value)

    @pytest.mark.parametrize("content", ["", "   \n", "\n\n"])
    def test_empty_file(self, tmp_path, suite, content):
        path = tmp_path / "key"
        path.write_text(content)
        with pytest.raises(EmptyKeyError):
            restore_from_file(path, suite)

    def test_corrupt_file(self, tmp_path, suite):
        path = tmp_path / "key"
        path.write_text("not a hex key")
        with pytest.raises(InvalidKeyError):
            restore_from_file(path, suite)

    def test_non_utf8_file(self, tmp_path, suite):
        path = tmp_path / "key"
        path.write_bytes(b"\xff\xfe\xfd")
        with pytest.raises(InvalidKeyError):
            restore_from_file(path, suite)

    def test_directory_unreadable(self, tmp_path, suite):
        """A path that cannot be read as a file is reported, not crashed on."""
        with pytest.raises(EmptyKeyError):
            restore_from_file(tmp_path, suite)

    def test_read_with_newline(self, tmp_path, alice, suite):
        """Hand-edited files with a trailing newline still load."""
        path = tmp_path / "key"
        path.write_text(export_private(alice) + "\n")
        assert export_public(restore_from_file(path, suite)) == export_public(alice)

    def test_read_private_key_text(self, tmp_path):
        path = tmp_path / "key"
        path.write_text("abcd")
        assert read_private_key(path) == "abcd"


class TestWriteKey:
    """Tests for persisting private keys."""

    def test_write_and_restore(self, tmp_path, alice, suite):
        """Written key restores to the same key pair."""
        path = write_private_key(alice, tmp_path / "key")
        assert key_exists(path)
        assert path.read_text() == export_private(alice)
        assert export_public(restore_from_file(path, suite)) == export_public(alice)

    def test_hex_only_content(self, tmp_path, alice):
        """File holds the hex scalar only."""
        path = write_private_key(alice, tmp_path / "key")
        content = path.read_text()
        assert content == content.strip()
        bytes.fromhex(content)

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_owner_only_permissions(self, tmp_path, alice):
        path = write_private_key(alice, tmp_path / "key")
        assert stat.S_IMODE(os.stat(path).st_mode) == KEY_FILE_MODE

    def test_refuses_overwrite(self, tmp_path, alice, bob):
        path = write_private_key(alice, tmp_path / "key")
        with pytest.raises(KeyFileExistsError) as exc:
            write_private_key(bob, path)
        assert isinstance(exc.value, FileExistsError)
        assert path.read_text() == export_private(alice)

    def test_overwrite(self, tmp_path, alice, bob):
        path = write_private_key(alice, tmp_path / "key")
        write_private_key(bob, path, overwrite=True)
        assert path.read_text() == export_private(bob)

    def test_no_temp_files_left(self, tmp_path, alice, bob):
        path = write_private_key(alice, tmp_path / "key")
        write_private_key(bob, path, overwrite=True)
        assert sorted(os.listdir(tmp_path)) == ["key"]

    def test_missing_directory(self, tmp_path, alice):
        """Write failures become KeyWriteError."""
        with pytest.raises(KeyWriteError) as exc:
            write_private_key(alice, tmp_path / "nope" / "key")
        assert exc.value.kind is ErrorKind.KEY_WRITE_FAILED

    def test_failed_rename_cleans_up(self, tmp_path, alice, monkeypatch):
        """A failure after the temp file exists removes it."""
        def broken_replace(src, dst):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(KeyWriteError):
            write_private_key(alice, tmp_path / "key")
        assert os.listdir(tmp_path) == []

    def test_key_exists(self, tmp_path):
        assert not key_exists(tmp_path / "key")
        (tmp_path / "key").write_text("00")
        assert key_exists(tmp_path / "key")
