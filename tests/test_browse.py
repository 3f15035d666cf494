"""Tests for the keystroke-driven memo browser.

Sessions run against injected key sequences; the session quits on its own
once the sequence is exhausted.
"""

import io
from datetime import datetime

import pytest
from rich.console import Console

from memov.browse import BrowseSession, KeyInputSource
from memov.documents import MemoDocument


def add_memo(repo, title, tree=(), date=datetime(2023, 1, 1, 9, 0, 0)):
    memo = MemoDocument(date, title, category_tree=list(tree))
    repo.save(memo)
    return repo.path_for(memo)


def make_session(service, keys):
    output = io.StringIO()
    session = BrowseSession(
        service,
        key_source=KeyInputSource(key_sequence=keys),
        console=Console(file=output, width=120, color_system=None),
    )
    return session, output


# ============================================================================
# KeyInputSource Tests
# ============================================================================


class TestKeyInputSource:
    """Tests for KeyInputSource abstraction."""

    def test_returns_keys_in_order(self):
        source = KeyInputSource(key_sequence=["a", "b"])

        assert source.get_key() == "a"
        assert source.get_key() == "b"

    def test_auto_quits_when_exhausted(self):
        source = KeyInputSource(key_sequence=["a"])
        source.get_key()

        assert source.exhausted
        assert source.get_key() == "q"

    def test_get_line_reads_until_enter(self):
        source = KeyInputSource(key_sequence=["h", "i", "\r", "x"])

        assert source.get_line() == "hi"
        assert source.get_key() == "x"


# ============================================================================
# Browse Session Tests
# ============================================================================


class TestBrowseSession:
    """Tests for BrowseSession key handling."""

    def test_quit_immediately(self, memo_service, memo_repo):
        add_memo(memo_repo, "Only")
        session, output = make_session(memo_service, ["q"])

        stats = session.run()

        assert not any(stats.values())
        assert "Only" in output.getvalue()

    def test_empty_repository(self, memo_service):
        session, output = make_session(memo_service, ["j", "k", "\r", "d"])

        session.run()

        assert "No memos found." in output.getvalue()

    def test_cursor_movement_and_open(self, memo_service, memo_repo, editor):
        add_memo(memo_repo, "A", ["a"])
        second = add_memo(memo_repo, "B", ["b"])
        session, _ = make_session(memo_service, ["j", "j", "\r"])

        stats = session.run()

        assert stats["opened"] == 1
        assert editor.opened == [second]

    def test_delete_confirmed(self, memo_service, memo_repo, trash):
        path = add_memo(memo_repo, "Doomed")
        session, _ = make_session(memo_service, ["d", "y"])

        stats = session.run()

        assert stats["deleted"] == 1
        assert not path.exists()
        assert (trash.root / path.name).is_file()

    def test_delete_declined(self, memo_service, memo_repo):
        path = add_memo(memo_repo, "Kept")
        session, _ = make_session(memo_service, ["d", "n"])

        stats = session.run()

        assert stats["deleted"] == 0
        assert path.exists()

    def test_rename(self, memo_service, memo_repo):
        old = add_memo(memo_repo, "Old", ["a"])
        session, _ = make_session(memo_service, ["r", *"New Title", "\r"])

        stats = session.run()

        assert stats["renamed"] == 1
        assert not old.exists()
        assert (memo_repo.root / "a" / "20230101Sun090000_memo_New-Title.md").is_file()

    def test_rename_with_empty_title_is_canceled(self, memo_service, memo_repo):
        old = add_memo(memo_repo, "Old")
        session, _ = make_session(memo_service, ["r", "\r"])

        stats = session.run()

        assert stats["renamed"] == 0
        assert old.exists()

    def test_rename_conflict_shows_error(self, memo_service, memo_repo):
        add_memo(memo_repo, "A")
        add_memo(memo_repo, "B")
        session, output = make_session(memo_service, ["r", "B", "\r"])

        stats = session.run()

        assert stats["renamed"] == 0
        assert "Error:" in output.getvalue()

    def test_move_through_dialog(self, memo_service, memo_repo):
        old = add_memo(memo_repo, "Mover", ["a"])
        (memo_repo.root / "b").mkdir()
        session, output = make_session(memo_service, ["m", "j", " ", "\r"])

        stats = session.run()

        assert stats["moved"] == 1
        assert not old.exists()
        assert (memo_repo.root / "b" / old.name).is_file()
        assert "Currently in: a" in output.getvalue()

    def test_move_to_new_category(self, memo_service, memo_repo):
        old = add_memo(memo_repo, "Mover", ["a"])
        keys = ["m", "n", *"x/y", "\r", "j", "j", " ", "\r"]
        session, _ = make_session(memo_service, keys)

        session.run()

        assert (memo_repo.root / "x" / "y" / old.name).is_file()

    def test_move_canceled(self, memo_service, memo_repo):
        old = add_memo(memo_repo, "Stay", ["a"])
        (memo_repo.root / "b").mkdir()
        session, _ = make_session(memo_service, ["m", "j", " ", "\x1b"])

        stats = session.run()

        assert stats["moved"] == 0
        assert old.exists()

    def test_move_dialog_ends_with_key_sequence(self, memo_service, memo_repo):
        old = add_memo(memo_repo, "Stay", ["a"])
        session, _ = make_session(memo_service, ["m", "j"])

        stats = session.run()

        assert stats["moved"] == 0
        assert old.exists()

    def test_duplicate(self, memo_service, memo_repo):
        add_memo(memo_repo, "Twin", ["a"])
        session, _ = make_session(memo_service, ["c"])

        stats = session.run()

        assert stats["duplicated"] == 1
        assert (memo_repo.root / "a" / "20230101Sun090001_memo_Twin.md").is_file()

    def test_new_memo_in_current_category(self, memo_service, memo_repo, memov_paths):
        add_memo(memo_repo, "Existing", ["work"])
        session, _ = make_session(memo_service, ["n", *"Fresh", "\r"])

        stats = session.run()

        assert stats["created"] == 1
        assert (memov_paths.memos_dir / "work" / "20230102Mon150405_memo_Fresh.md").is_file()

    @pytest.mark.parametrize("quit_key", ["q", "\x03"])
    def test_quit_keys(self, memo_service, memo_repo, editor, quit_key):
        add_memo(memo_repo, "A")
        session, _ = make_session(memo_service, [quit_key, "\r"])

        session.run()

        assert editor.opened == []
