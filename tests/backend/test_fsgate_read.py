"""
Tests for the FsGateRead tools.

Tests cover:
- Whole-file reads and the header format
- 0-based offset / limit ranges and the size-limit waiver
- Binary detection, empty files, invalid arguments
- read_multiple_files sections with inline errors
"""
from pathlib import Path

import pytest

from tools.fsgate.common import result_text
from tools.fsgate.fsgate_read.tool import (
    _read_file_impl,
    _read_multiple_files_impl,
    create_read_file_tool,
    split_lines,
)

MAX_READ = 10 * 1024 * 1024


class TestSplitLines:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", []),
            ("one", ["one"]),
            ("one\n", ["one"]),
            ("one\ntwo", ["one", "two"]),
            ("one\r\ntwo\r\n", ["one", "two"]),
            ("a\n\nb", ["a", "", "b"]),
        ],
    )
    def test_split(self, text: str, expected: list[str]) -> None:
        assert split_lines(text) == expected


class TestReadFile:

    @pytest.mark.asyncio
    async def test_entire_small_file(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "test.txt"
        target.write_text("line one\nline two\nline three")

        result = await _read_file_impl(session_id, str(target), MAX_READ)
        text = result_text(result)
        assert "is_error" not in result
        assert text.startswith(f"File: {target} (Lines 1-3 of 3 total, 28 B)\n\n")
        assert text.endswith("line one\nline two\nline three")

    @pytest.mark.asyncio
    async def test_offset_and_limit(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "test.txt"
        target.write_text("line0\nline1\nline2\nline3\nline4")

        result = await _read_file_impl(session_id, str(target), MAX_READ, offset=1, limit=2)
        text = result_text(result)
        assert "Lines 2-3 of 5 total" in text
        assert "line1\nline2" in text
        assert "line0" not in text
        assert "line3" not in text

    @pytest.mark.asyncio
    async def test_limit_only(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "test.txt"
        target.write_text("a\nb\nc\nd")

        text = result_text(await _read_file_impl(session_id, str(target), MAX_READ, limit=2))
        assert "Lines 1-2 of 4 total" in text
        assert text.endswith("a\nb")

    @pytest.mark.asyncio
    async def test_limit_past_end_is_clamped(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "test.txt"
        target.write_text("a\nb\nc")
        text = result_text(
            await _read_file_impl(session_id, str(target), MAX_READ, offset=2, limit=10)
        )
        assert "Lines 3-3 of 3 total" in text

    @pytest.mark.asyncio
    async def test_too_large(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "big.txt"
        target.write_text("x" * 200)

        result = await _read_file_impl(session_id, str(target), 100)
        assert result["is_error"] is True
        assert f"File too large: {target} (200 bytes, max 100 bytes)" in result_text(result)

    @pytest.mark.asyncio
    async def test_size_limit_waived_with_range(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "big.txt"
        target.write_text("line1\nline2\nline3")

        result = await _read_file_impl(session_id, str(target), 5, offset=0, limit=1)
        assert "is_error" not in result
        assert result_text(result).endswith("line1")

    @pytest.mark.asyncio
    async def test_binary_detected(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "binary.bin"
        target.write_bytes(b"hello\x00world")

        result = await _read_file_impl(session_id, str(target), MAX_READ)
        assert result["is_error"] is True
        assert "Binary file" in result_text(result)

    @pytest.mark.asyncio
    async def test_nul_after_check_window_is_text(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "late.txt"
        target.write_bytes(b"a" * 9000 + b"\x00")
        result = await _read_file_impl(session_id, str(target), MAX_READ)
        assert "is_error" not in result

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "latin.txt"
        target.write_bytes(b"caf\xe9")
        text = result_text(await _read_file_impl(session_id, str(target), MAX_READ))
        assert text.endswith("caf\ufffd")

    @pytest.mark.asyncio
    async def test_empty_file(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "empty.txt"
        target.write_text("")

        text = result_text(await _read_file_impl(session_id, str(target), MAX_READ))
        assert text == f"File: {target} (0 B)\n\n(empty file)"

    @pytest.mark.asyncio
    async def test_offset_beyond_end(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "test.txt"
        target.write_text("one\ntwo")

        result = await _read_file_impl(session_id, str(target), MAX_READ, offset=10)
        assert result["is_error"] is True
        assert "Offset 10 is beyond end of file (2 lines)" in result_text(result)

    @pytest.mark.asyncio
    async def test_string_offset_coerced(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "test.txt"
        target.write_text("a\nb\nc")
        text = result_text(await _read_file_impl(session_id, str(target), MAX_READ, offset="1"))
        assert "Lines 2-3 of 3 total" in text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("offset", ["abc", -1, True])
    async def test_invalid_offset(self, session_id: str, sandbox: Path, offset) -> None:
        target = sandbox / "test.txt"
        target.write_text("a")
        result = await _read_file_impl(session_id, str(target), MAX_READ, offset=offset)
        assert result["is_error"] is True
        assert "offset" in result_text(result)

    @pytest.mark.asyncio
    async def test_directory_rejected(self, session_id: str, sandbox: Path) -> None:
        result = await _read_file_impl(session_id, str(sandbox), MAX_READ)
        assert result["is_error"] is True
        assert "Not a file" in result_text(result)

    @pytest.mark.asyncio
    async def test_outside_denied(self, session_id: str, outside: Path) -> None:
        result = await _read_file_impl(session_id, str(outside / "secret.txt"), MAX_READ)
        assert result["is_error"] is True
        assert "Access denied" in result_text(result)
        assert "top secret" not in result_text(result)

    @pytest.mark.asyncio
    async def test_symlink_escape_denied(
        self, session_id: str, sandbox: Path, outside: Path
    ) -> None:
        link = sandbox / "innocent.txt"
        link.symlink_to(outside / "secret.txt")
        result = await _read_file_impl(session_id, str(link), MAX_READ)
        assert result["is_error"] is True
        assert "Access denied" in result_text(result)

    @pytest.mark.asyncio
    async def test_tool_wrapper_passes_range(self, session_id: str, sandbox: Path) -> None:
        target = sandbox / "test.txt"
        target.write_text("a\nb\nc")
        tool = create_read_file_tool(session_id, MAX_READ)
        result = await tool.handler({"path": str(target), "offset": 2})
        assert "Lines 3-3 of 3 total" in result_text(result)


class TestReadMultipleFiles:

    @pytest.mark.asyncio
    async def test_sections(self, session_id: str, sandbox: Path) -> None:
        first = sandbox / "a.txt"
        second = sandbox / "b.txt"
        first.write_text("alpha\n")
        second.write_text("beta\ngamma")

        text = result_text(
            await _read_multiple_files_impl(session_id, [str(first), str(second)], MAX_READ)
        )
        assert text == (
            f"=== {first} (1 lines, 6 B) ===\nalpha\n"
            f"\n\n"
            f"=== {second} (2 lines, 10 B) ===\nbeta\ngamma"
        )

    @pytest.mark.asyncio
    async def test_errors_inline(self, session_id: str, sandbox: Path, outside: Path) -> None:
        good = sandbox / "good.txt"
        good.write_text("ok")
        denied = str(outside / "secret.txt")
        missing = str(sandbox / "missing.txt")

        result = await _read_multiple_files_impl(
            session_id, [denied, str(good), missing], MAX_READ
        )
        text = result_text(result)
        assert "is_error" not in result
        assert f"=== {denied} ===\nError: Access denied: {denied}" in text
        assert f"=== {good} (1 lines, 2 B) ===\nok" in text
        assert f"=== {missing} ===\nError: Not found: {missing}" in text
        assert text.index(denied) < text.index(str(good)) < text.index(missing)

    @pytest.mark.asyncio
    async def test_size_limit_applies_per_file(self, session_id: str, sandbox: Path) -> None:
        big = sandbox / "big.txt"
        big.write_text("x" * 50)
        text = result_text(await _read_multiple_files_impl(session_id, [str(big)], 10))
        assert "Error: File too large" in text

    @pytest.mark.asyncio
    async def test_paths_must_be_list(self, session_id: str) -> None:
        result = await _read_multiple_files_impl(session_id, "not-a-list", MAX_READ)
        assert result["is_error"] is True
