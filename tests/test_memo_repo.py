"""Tests for the memo repository: layout, move, rename, duplicate, delete and tidy."""

from datetime import datetime

import pytest

from memov.documents import MemoDocument
from memov.errors import ConflictError, FormatMismatchError, NotFoundError
from memov.markdown import HeadingBlock
from memov.trash import Trash

WHEN = datetime(2023, 1, 2, 15, 4, 5)


def save_memo(repo, title, tree=(), date=WHEN, body=""):
    blocks = [HeadingBlock(level=2, heading_text="Notes", content_text=body)] if body else []
    memo = MemoDocument(date, title, category_tree=list(tree), heading_blocks=blocks)
    repo.save(memo)
    return memo


# ============================================================================
# Layout
# ============================================================================


class TestLayout:
    """Tests for memo file placement."""

    def test_save_places_memo_under_category(self, memo_repo):
        memo = save_memo(memo_repo, "Hello World", ["a", "b"])

        path = memo_repo.path_for(memo)
        assert path == memo_repo.root / "a" / "b" / "20230102Mon150405_memo_Hello-World.md"
        assert path.is_file()

    def test_load_derives_category_from_directory(self, memo_repo):
        save_memo(memo_repo, "Deep", ["x", "y"])

        [memo] = memo_repo.entries()
        assert memo.category_tree == ["x", "y"]
        assert memo.title == "Deep"

    def test_entries_sorted_by_date(self, memo_repo):
        save_memo(memo_repo, "Later", ["a"], date=datetime(2023, 1, 3, 9, 0, 0))
        save_memo(memo_repo, "Earlier", ["z"], date=datetime(2023, 1, 1, 9, 0, 0))
        save_memo(memo_repo, "Middle", [], date=datetime(2023, 1, 2, 9, 0, 0))

        assert [m.title for m in memo_repo.entries()] == ["Earlier", "Middle", "Later"]

    def test_entries_skip_non_memo_and_hidden_files(self, memo_repo):
        save_memo(memo_repo, "Real")
        (memo_repo.root / "index.md").write_text("# index\n")
        (memo_repo.root / "weekly_report.md").write_text("# weekly_report\n")
        hidden = memo_repo.root / ".trash"
        hidden.mkdir()
        (hidden / "20230101Sun000000_memo_Gone.md").write_text("# Gone\n")

        assert [m.title for m in memo_repo.entries()] == ["Real"]

    def test_entries_skip_malformed_memos(self, memo_repo):
        save_memo(memo_repo, "Good")
        (memo_repo.root / "20230102Mon150405_memo_Bad.md").write_text("---\ntitle: [\n---\n")
        (memo_repo.root / "20230102Xyz150405_memo_Odd.md").write_text("# Odd\n")

        assert [m.title for m in memo_repo.entries()] == ["Good"]

    def test_entries_skip_undecodable_memos(self, memo_repo):
        save_memo(memo_repo, "Good")
        (memo_repo.root / "20230102Mon150405_memo_z.md").write_bytes(b"# z\n\n\xff\xfe bad\n")

        assert [m.title for m in memo_repo.entries()] == ["Good"]
        with pytest.raises(FormatMismatchError):
            memo_repo.find(memo_repo.root / "20230102Mon150405_memo_z.md")

    def test_save_rejects_title_with_separator(self, memo_repo):
        with pytest.raises(FormatMismatchError):
            memo_repo.save(MemoDocument(WHEN, "a/b"))

    def test_categories_lists_directories(self, memo_repo):
        save_memo(memo_repo, "One", ["a", "b"])
        save_memo(memo_repo, "Two", ["c"])

        assert sorted(memo_repo.categories()) == [["a"], ["a", "b"], ["c"]]

    def test_find_outside_root(self, memo_repo, tmp_path):
        outside = tmp_path / "elsewhere.md"
        outside.write_text("# x\n")

        with pytest.raises(NotFoundError):
            memo_repo.find(outside)

    def test_find_missing_file(self, memo_repo):
        with pytest.raises(NotFoundError):
            memo_repo.find(memo_repo.root / "20230102Mon150405_memo_None.md")


# ============================================================================
# Move / rename
# ============================================================================


class TestMoveAndRename:
    """Tests for relocating memos."""

    def test_move_to_other_category(self, memo_repo):
        memo = save_memo(memo_repo, "Hello World", ["a", "b"], body="keep me")
        old_path = memo_repo.path_for(memo)

        new_path = memo_repo.move(memo, ["x"])

        assert not old_path.exists()
        assert new_path == memo_repo.root / "x" / "20230102Mon150405_memo_Hello-World.md"
        assert memo.category_tree == ["x"]

        [loaded] = memo_repo.entries()
        assert loaded.category_tree == ["x"]
        assert loaded.declared_category == ["x"]
        assert loaded.heading_blocks[0].content_text == "keep me"

    def test_move_to_root(self, memo_repo):
        memo = save_memo(memo_repo, "Top", ["a"])

        new_path = memo_repo.move(memo, [])

        assert new_path.parent == memo_repo.root
        assert memo_repo.entries()[0].category_tree == []

    def test_move_conflict_leaves_source(self, memo_repo):
        memo = save_memo(memo_repo, "Same", ["a"])
        save_memo(memo_repo, "Same", ["b"])

        with pytest.raises(ConflictError):
            memo_repo.move(memo, ["b"])

        assert memo_repo.path_for(memo).exists()
        assert memo.category_tree == ["a"]

    def test_move_rejects_invalid_category(self, memo_repo):
        memo = save_memo(memo_repo, "Note", ["a"])

        with pytest.raises(FormatMismatchError):
            memo_repo.move(memo, [".."])

    def test_rename_keeps_date_and_category(self, memo_repo):
        memo = save_memo(memo_repo, "Old Name", ["a"], body="content")

        new_path = memo_repo.rename(memo, "New Name")

        assert new_path == memo_repo.root / "a" / "20230102Mon150405_memo_New-Name.md"
        assert not (memo_repo.root / "a" / "20230102Mon150405_memo_Old-Name.md").exists()
        loaded = memo_repo.find(new_path)
        assert loaded.title == "New Name"
        assert loaded.date == WHEN
        assert "content" in new_path.read_text()

    def test_rename_conflict(self, memo_repo):
        first = save_memo(memo_repo, "A")
        save_memo(memo_repo, "B")

        with pytest.raises(ConflictError):
            memo_repo.rename(first, "B")

        assert memo_repo.path_for(first).exists()
        assert first.title == "A"

    def test_rename_rejects_empty_title(self, memo_repo):
        memo = save_memo(memo_repo, "A")

        with pytest.raises(FormatMismatchError):
            memo_repo.rename(memo, "   ")

    def test_move_keeps_leading_thematic_break(self, memo_repo):
        path = memo_repo.root / "20230102Mon150405_memo_x.md"
        path.write_text("---\n\nsome text\n\n---\n\n## h\n\nbody\n")
        [memo] = memo_repo.entries()

        new_path = memo_repo.move(memo, ["work"])

        text = new_path.read_text()
        assert "some text" in text
        assert text.endswith("# x\n\n---\n\nsome text\n\n---\n\n## h\n\nbody\n")
        loaded = memo_repo.find(new_path)
        assert loaded.declared_category == ["work"]
        assert loaded.top_level_body.content_text == "---\n\nsome text\n\n---"

    def test_rename_keeps_non_mapping_leading_block(self, memo_repo):
        path = memo_repo.root / "20230102Mon150405_memo_y.md"
        path.write_text("---\n- a\n- b\n---\nbody")
        [memo] = memo_repo.entries()
        assert memo.declared_title is None
        assert memo.declared_category is None

        new_path = memo_repo.rename(memo, "z")

        assert new_path.read_text().endswith("# z\n\n---\n- a\n- b\n---\nbody\n")
        assert memo_repo.find(new_path).title == "z"

    def test_rename_same_slug_rewrites_title(self, memo_repo):
        memo = save_memo(memo_repo, "Hello-World")

        path = memo_repo.rename(memo, "Hello World")

        assert path.name == "20230102Mon150405_memo_Hello-World.md"
        assert memo_repo.find(path).title == "Hello World"


# ============================================================================
# Duplicate / delete
# ============================================================================


def test_duplicate_takes_next_free_second(memo_repo):
    memo = save_memo(memo_repo, "Copy Me", ["a"], body="body")
    save_memo(memo_repo, "Copy Me", ["a"], date=datetime(2023, 1, 2, 15, 4, 6))

    copy = memo_repo.duplicate(memo)

    assert copy.date == datetime(2023, 1, 2, 15, 4, 7)
    path = memo_repo.path_for(copy)
    assert path.is_file()
    assert "body" in path.read_text()
    assert len(memo_repo.entries()) == 3


def test_delete_moves_to_trash(memo_repo, trash):
    memo = save_memo(memo_repo, "Doomed")
    path = memo_repo.path_for(memo)

    target = memo_repo.delete(memo)

    assert not path.exists()
    assert target == trash.root / path.name
    assert target.is_file()


def test_trash_renames_on_clash(tmp_path):
    trash = Trash(tmp_path / "trash")
    source = tmp_path / "note.md"

    source.write_text("one")
    first = trash.move(source)
    source.write_text("two")
    second = trash.move(source, now=datetime(2023, 1, 2, 3, 4, 5))

    assert first.name == "note.md"
    assert second.name == "note_20230102_030405.md"
    assert second.read_text() == "two"


def test_freedesktop_trash_writes_info(tmp_path):
    trash = Trash(tmp_path / "Trash", freedesktop=True)
    source = tmp_path / "note.md"
    source.write_text("x")

    target = trash.move(source, now=datetime(2023, 1, 2, 3, 4, 5))

    assert target == tmp_path / "Trash" / "files" / "note.md"
    info = (tmp_path / "Trash" / "info" / "note.md.trashinfo").read_text()
    assert info.startswith("[Trash Info]\n")
    assert "DeletionDate=2023-01-02T03:04:05" in info


def test_trash_missing_file(tmp_path):
    with pytest.raises(NotFoundError):
        Trash(tmp_path / "trash").move(tmp_path / "absent.md")


def test_trash_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("MEMOV_TRASH_DIR", str(tmp_path / "custom"))

    trash = Trash.default(fallback_dir=tmp_path / "fallback")

    assert trash.root == tmp_path / "custom"
    assert trash.files_dir == tmp_path / "custom"


# ============================================================================
# Tidy
# ============================================================================


class TestTidy:
    """Tests for re-aligning memo files with their front matter."""

    def test_moves_to_declared_category_and_removes_empty_dirs(self, memo_repo):
        old_dir = memo_repo.root / "old"
        old_dir.mkdir()
        (old_dir / "20230102Mon150405_memo_Note.md").write_text(
            "---\ncategory:\n- new\n- sub\ntitle: Note\n---\n\n# Note\n\nbody\n"
        )

        result = memo_repo.tidy()

        assert result.moved == [
            "old/20230102Mon150405_memo_Note.md -> new/sub/20230102Mon150405_memo_Note.md"
        ]
        assert result.removed_dirs == ["old"]
        assert result.changed
        assert (memo_repo.root / "new" / "sub" / "20230102Mon150405_memo_Note.md").is_file()
        assert not old_dir.exists()

    def test_renames_to_declared_title(self, memo_repo):
        (memo_repo.root / "20230102Mon150405_memo_Note.md").write_text(
            "---\ncategory: []\ntitle: Better Note\n---\n\n# Better Note\n"
        )

        result = memo_repo.tidy()

        assert result.renamed == [
            "20230102Mon150405_memo_Note.md -> 20230102Mon150405_memo_Better-Note.md"
        ]
        assert memo_repo.entries()[0].title == "Better Note"

    def test_conflict_is_skipped(self, memo_repo):
        save_memo(memo_repo, "Twin", ["x"])
        (memo_repo.root / "20230102Mon150405_memo_Twin.md").write_text(
            "---\ncategory:\n- x\ntitle: Twin\n---\n\n# Twin\n"
        )

        result = memo_repo.tidy()

        assert result.skipped == ["20230102Mon150405_memo_Twin.md"]
        assert (memo_repo.root / "20230102Mon150405_memo_Twin.md").is_file()

    def test_consistent_memos_are_untouched(self, memo_repo):
        save_memo(memo_repo, "Fine", ["a"])

        result = memo_repo.tidy()

        assert not result.changed
        assert result.skipped == []

    def test_memo_without_front_matter_stays(self, memo_repo):
        (memo_repo.root / "loose").mkdir()
        (memo_repo.root / "loose" / "20230102Mon150405_memo_Plain.md").write_text("# Plain\n")

        result = memo_repo.tidy()

        assert not result.changed
        assert (memo_repo.root / "loose" / "20230102Mon150405_memo_Plain.md").is_file()
