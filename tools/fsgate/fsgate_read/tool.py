"""
FsGateRead - Sandboxed text file reading.

Tools:
- read_file: whole file or a line range, with a header describing the slice
- read_multiple_files: several whole files in one call, errors reported inline

Limits:
- Files larger than max_read_size are rejected unless a line range is given
- Files with a NUL byte in their first 8 KiB are treated as binary and refused
- Invalid UTF-8 is decoded with replacement characters

Security: Uses the session's PathResolver; every path must resolve to a
regular file inside a sandbox root.
"""
import logging
from pathlib import Path
from typing import Any, Optional

from claude_agent_sdk import create_sdk_mcp_server, tool

from src.core.errors import BinaryFile, FileTooLarge, FsError, io_error_message
from src.core.formatting import format_size
from src.core.path_resolver import PathResolver, ResolutionIntent, get_path_resolver

from ..common import optional_int, tool_error, tool_result

logger = logging.getLogger(__name__)

# Tool name constants
FSGATE_READ_FILE_TOOL: str = "mcp__fsgate__read_file"
FSGATE_READ_MULTIPLE_TOOL: str = "mcp__fsgate__read_multiple_files"

# Bytes inspected for NUL when detecting binary content
BINARY_CHECK_SIZE: int = 8192


def split_lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing CR per line and the final empty line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _load_text(canonical: Path, display_path: str, max_read_size: Optional[int]) -> tuple[str, int]:
    """
    Read and decode a file, enforcing the size and binary checks.

    Args:
        canonical: Resolved path to read
        display_path: Caller-supplied path used in error messages
        max_read_size: Size ceiling in bytes, or None to skip the check

    Returns:
        Tuple of (decoded text, size in bytes)
    """
    size = canonical.stat().st_size
    if max_read_size is not None and size > max_read_size:
        raise FileTooLarge(display_path, size, max_read_size)

    content = canonical.read_bytes()
    if b"\x00" in content[:BINARY_CHECK_SIZE]:
        raise BinaryFile(display_path)

    return content.decode("utf-8", errors="replace"), size


def read_file_range(
    canonical: Path,
    display_path: str,
    max_read_size: int,
    offset: Optional[int] = None,
    limit: Optional[int] = None,
) -> str:
    """
    Render a file (or a 0-based line range of it) with its header.

    The size ceiling is waived when either offset or limit is given, so a
    large file can still be paged through.

    Raises:
        FileTooLarge, BinaryFile: From the content checks
        FsError: If offset is at or beyond the last line
        OSError: If the file cannot be read
    """
    has_range = offset is not None or limit is not None
    text, size = _load_text(canonical, display_path, None if has_range else max_read_size)

    lines = split_lines(text)
    total = len(lines)
    if total == 0:
        return f"File: {canonical} (0 B)\n\n(empty file)"

    start = offset or 0
    if start >= total:
        raise FsError(f"Offset {start} is beyond end of file ({total} lines)", display_path)

    end = total if limit is None else min(start + limit, total)
    header = f"File: {canonical} (Lines {start + 1}-{end} of {total} total, {format_size(size)})"
    return header + "\n\n" + "\n".join(lines[start:end])


def _read_section(resolver: PathResolver, file_path: str, max_read_size: int) -> str:
    resolved = resolver.resolve(file_path, ResolutionIntent.MUST_BE_FILE)
    text, size = _load_text(resolved.canonical, file_path, max_read_size)
    total = len(split_lines(text))
    return f"=== {resolved.canonical} ({total} lines, {format_size(size)}) ===\n{text}"


async def _read_file_impl(
    session_id: str,
    file_path: str,
    max_read_size: int,
    offset: Any = None,
    limit: Any = None,
) -> dict[str, Any]:
    """
    Core read_file implementation - testable without MCP tool wrapper.

    Args:
        session_id: The session ID (used to get the PathResolver)
        file_path: File to read
        max_read_size: Size ceiling for whole-file reads
        offset: 0-based first line (optional)
        limit: Maximum number of lines (optional)

    Returns:
        Dict with result or error
    """
    try:
        offset_value = optional_int(offset, "offset")
        limit_value = optional_int(limit, "limit")
    except ValueError as e:
        return tool_error(str(e))

    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateRead: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = resolver.resolve(file_path, ResolutionIntent.MUST_BE_FILE)
        output = read_file_range(
            resolved.canonical, file_path, max_read_size, offset_value, limit_value
        )
    except FsError as e:
        logger.warning(f"FsGateRead: Rejected '{file_path}' - {e}")
        return tool_error(str(e))
    except OSError as e:
        return tool_error(io_error_message(e, file_path))

    logger.info(f"FsGateRead: Read {resolved.canonical}")
    return tool_result(output)


async def _read_multiple_files_impl(
    session_id: str,
    paths: Any,
    max_read_size: int,
) -> dict[str, Any]:
    """
    Core read_multiple_files implementation - testable without MCP tool wrapper.

    A failure on one file is rendered in its section; the remaining files
    are still read.
    """
    if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
        return tool_error("paths must be a list of strings")

    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateRead: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    sections: list[str] = []
    for file_path in paths:
        try:
            sections.append(_read_section(resolver, file_path, max_read_size))
        except FsError as e:
            logger.warning(f"FsGateRead: Rejected '{file_path}' - {e}")
            sections.append(f"=== {file_path} ===\nError: {e}")
        except OSError as e:
            sections.append(f"=== {file_path} ===\nError: {io_error_message(e, file_path)}")

    logger.info(f"FsGateRead: Read {len(paths)} file(s)")
    return tool_result("\n\n".join(sections))


def create_read_file_tool(session_id: str, max_read_size: int):
    """
    Create the read_file tool bound to a session.

    Args:
        session_id: The session ID (used to get the PathResolver)
        max_read_size: Size ceiling in bytes for whole-file reads

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "read_file",
        """Reads a file and returns its contents.

Supports reading specific line ranges using offset (0-based) and limit
parameters. Returns a header with file path and line information.

Args:
    path: File to read
    offset: Line offset (0-based) to start reading from (optional)
    limit: Maximum number of lines to read (optional)

Examples:
    read_file(path="/srv/projects/README.md")
    read_file(path="/srv/projects/app.log", offset=100, limit=50)
""",
        {
            "type": "object",
            "properties": {
                "path": {"type": "string"},
                "offset": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Line offset (0-based) to start reading from",
                },
                "limit": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Maximum number of lines to read",
                },
            },
            "required": ["path"],
        },
    )
    async def read_file(args: dict[str, Any]) -> dict[str, Any]:
        """Read file contents."""
        return await _read_file_impl(
            session_id=bound_session_id,
            file_path=args.get("path", ""),
            max_read_size=max_read_size,
            offset=args.get("offset"),
            limit=args.get("limit"),
        )

    return read_file


def create_read_multiple_files_tool(session_id: str, max_read_size: int):
    """
    Create the read_multiple_files tool bound to a session.

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "read_multiple_files",
        "Reads multiple files and returns their contents with clear separators "
        "between each file. If any file fails to read, the error is included "
        "inline and remaining files are still processed.",
        {
            "type": "object",
            "properties": {
                "paths": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["paths"],
        },
    )
    async def read_multiple_files(args: dict[str, Any]) -> dict[str, Any]:
        return await _read_multiple_files_impl(
            session_id=bound_session_id,
            paths=args.get("paths", []),
            max_read_size=max_read_size,
        )

    return read_multiple_files


def create_fsgate_read_mcp_server(
    session_id: str,
    max_read_size: int,
    server_name: str = "fsgate",
    version: str = "1.0.0",
):
    """
    Create an in-process MCP server with only the read tools.

    Args:
        session_id: The session ID for PathResolver lookup.
        max_read_size: Size ceiling in bytes for whole-file reads.
        server_name: MCP server name.
        version: Server version.

    Returns:
        McpSdkServerConfig for use in ClaudeAgentOptions.mcp_servers.
    """
    tools = [
        create_read_file_tool(session_id=session_id, max_read_size=max_read_size),
        create_read_multiple_files_tool(session_id=session_id, max_read_size=max_read_size),
    ]

    logger.info(f"Created FsGateRead MCP server for session {session_id}")

    return create_sdk_mcp_server(
        name=server_name,
        version=version,
        tools=tools,
    )
