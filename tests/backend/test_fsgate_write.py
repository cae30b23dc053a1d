"""
Tests for the FsGateWrite tools.

Tests cover:
- write_file create / overwrite and parent requirements
- edit_file uniqueness rules, sequential edits, diff output
- create_directory nesting, idempotence and traversal rejection
"""
from pathlib import Path

import pytest

from src.core.errors import EditFailed
from tools.fsgate.common import result_text
from tools.fsgate.fsgate_write.tool import (
    _create_directory_impl,
    _edit_file_impl,
    _write_file_impl,
    apply_edits,
    unified_diff,
)


class TestWriteFile:

    @pytest.mark.asyncio
    async def test_create_new_file(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "new.txt"
        result = await _write_file_impl(session_id, str(target), "hello world")

        assert "is_error" not in result
        assert result_text(result) == f"Wrote 11 B to {target}"
        assert target.read_text() == "hello world"

    @pytest.mark.asyncio
    async def test_overwrite(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "existing.txt"
        target.write_text("old content that is longer")

        await _write_file_impl(session_id, str(target), "new")
        assert target.read_text() == "new"

    @pytest.mark.asyncio
    async def test_utf8_size_counted_in_bytes(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "utf8.txt"
        result = await _write_file_impl(session_id, str(target), "héllo")
        assert result_text(result).startswith("Wrote 6 B")

    @pytest.mark.asyncio
    async def test_missing_parent(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "no" / "such" / "dir.txt"
        result = await _write_file_impl(session_id, str(target), "x")
        assert result["is_error"] is True
        assert "Not found" in result_text(result)
        assert not target.exists()

    @pytest.mark.asyncio
    async def test_outside_denied(self, session_id: str, outside: Path) -> None:
        target = outside / "planted.txt"
        result = await _write_file_impl(session_id, str(target), "x")
        assert result["is_error"] is True
        assert "Access denied" in result_text(result)
        assert not target.exists()

    @pytest.mark.asyncio
    async def test_dotdot_escape_denied(self, session_id: str, sandbox: Path, outside: Path) -> None:
        sneaky = f"{sandbox}/../outside/secret.txt"
        result = await _write_file_impl(session_id, sneaky, "pwned")
        assert result["is_error"] is True
        assert (outside / "secret.txt").read_text() == "top secret"

    @pytest.mark.asyncio
    async def test_dangling_symlink_denied(
        self, session_id: str, sandbox: Path, outside: Path
    ) -> None:
        link = sandbox / "dangling"
        link.symlink_to(outside / "created-through-link.txt")
        result = await _write_file_impl(session_id, str(link), "x")
        assert result["is_error"] is True
        assert not (outside / "created-through-link.txt").exists()

    @pytest.mark.asyncio
    async def test_content_must_be_string(self, session_id: str, sandbox: Path) -> None:
        result = await _write_file_impl(session_id, str(sandbox / "f.txt"), 42)
        assert result["is_error"] is True


class TestApplyEdits:

    def test_sequential_edits_see_previous_result(self) -> None:
        content = "alpha beta"
        edits = [
            {"old_text": "alpha", "new_text": "gamma"},
            {"old_text": "gamma beta", "new_text": "done"},
        ]
        assert apply_edits(content, edits, "f.txt") == "done"

    def test_not_found(self) -> None:
        with pytest.raises(EditFailed) as exc_info:
            apply_edits("abc", [{"old_text": "xyz", "new_text": ""}], "f.txt")
        assert "old_text not found: 'xyz'" in str(exc_info.value)

    def test_ambiguous(self) -> None:
        with pytest.raises(EditFailed) as exc_info:
            apply_edits("a a a", [{"old_text": "a", "new_text": "b"}], "f.txt")
        assert "matches 3 locations (must be unique)" in str(exc_info.value)

    def test_preview_is_cut(self) -> None:
        long_text = "x" * 200
        with pytest.raises(EditFailed) as exc_info:
            apply_edits("abc", [{"old_text": long_text, "new_text": ""}], "f.txt")
        assert repr("x" * 80) in str(exc_info.value)
        assert "x" * 81 not in str(exc_info.value)

    def test_unified_diff(self) -> None:
        diff = unified_diff("one\ntwo\n", "one\n2\n", "f.txt")
        assert diff.splitlines() == [
            "--- f.txt",
            "+++ f.txt",
            "@@ -1,2 +1,2 @@",
            " one",
            "-two",
            "+2",
        ]


class TestEditFile:

    @pytest.mark.asyncio
    async def test_edit_returns_diff(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "code.py"
        target.write_text("def hello():\n    return 1\n")

        result = await _edit_file_impl(
            session_id, str(target), [{"old_text": "return 1", "new_text": "return 2"}]
        )
        text = result_text(result)
        assert "is_error" not in result
        assert text.startswith(f"Applied 1 edit(s) to {target}\n\n")
        assert "-    return 1" in text
        assert "+    return 2" in text
        assert target.read_text() == "def hello():\n    return 2\n"

    @pytest.mark.asyncio
    async def test_failure_leaves_file_untouched(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "code.py"
        target.write_text("x = 1\nx = 1\n")

        result = await _edit_file_impl(
            session_id,
            str(target),
            [
                {"old_text": "x = 1\nx", "new_text": "y"},
                {"old_text": "missing", "new_text": "z"},
            ],
        )
        assert result["is_error"] is True
        assert "Edit failed" in result_text(result)
        assert target.read_text() == "x = 1\nx = 1\n"

    @pytest.mark.asyncio
    async def test_ambiguous_reported(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "dup.txt"
        target.write_text("same\nsame\n")
        result = await _edit_file_impl(
            session_id, str(target), [{"old_text": "same", "new_text": "other"}]
        )
        assert result["is_error"] is True
        assert "matches 2 locations" in result_text(result)

    @pytest.mark.asyncio
    async def test_non_utf8_rejected(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "latin.txt"
        target.write_bytes(b"caf\xe9")
        result = await _edit_file_impl(
            session_id, str(target), [{"old_text": "caf", "new_text": "tea"}]
        )
        assert result["is_error"] is True
        assert "not valid UTF-8" in result_text(result)
        assert target.read_bytes() == b"caf\xe9"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "edits",
        [
            [],
            "replace everything",
            [{"old_text": "a"}],
            [["a", "b"]],
        ],
    )
    async def test_malformed_edits(self, session_id: str, sandbox: Path, edits) -> None:
        target = sandbox / "f.txt"
        target.write_text("a")
        result = await _edit_file_impl(session_id, str(target), edits)
        assert result["is_error"] is True
        assert "edits" in result_text(result)

    @pytest.mark.asyncio
    async def test_missing_file(self, session_id: str, sandbox: Path) -> None:
        result = await _edit_file_impl(
            session_id, str(sandbox / "nope.txt"), [{"old_text": "a", "new_text": "b"}]
        )
        assert result["is_error"] is True
        assert "Not found" in result_text(result)


class TestCreateDirectory:

    @pytest.mark.asyncio
    async def test_nested(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "a" / "b" / "c"
        result = await _create_directory_impl(session_id, str(target))
        assert "is_error" not in result
        assert result_text(result) == f"Created directory {target}"
        assert target.is_dir()

    @pytest.mark.asyncio
    async def test_existing_directory_succeeds(self, session_id: str, sandbox: Path) -> None:
        (sandbox / "already").mkdir()
        result = await _create_directory_impl(session_id, str(sandbox / "already"))
        assert "is_error" not in result

    @pytest.mark.asyncio
    async def test_existing_file_fails(self, session_id: str, sandbox: Path) -> None:
        (sandbox / "file").write_text("x")
        result = await _create_directory_impl(session_id, str(sandbox / "file"))
        assert result["is_error"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("suffix", ["/../escape", "/a/../b", "/./c"])
    async def test_traversal_components_denied(
        self, session_id: str, sandbox: Path, suffix: str
    ) -> None:
        result = await _create_directory_impl(session_id, f"{sandbox}{suffix}")
        assert result["is_error"] is True
        assert "Access denied" in result_text(result)
        assert not (sandbox.parent / "escape").exists()
        assert not (sandbox / "b").exists()

    @pytest.mark.asyncio
    async def test_outside_denied(self, session_id: str, outside: Path) -> None:
        result = await _create_directory_impl(session_id, str(outside / "new" / "dir"))
        assert result["is_error"] is True
        assert not (outside / "new").exists()
