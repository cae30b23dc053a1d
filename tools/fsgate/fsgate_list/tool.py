"""
FsGateList - sandbox root discovery and flat directory listing.

Tools:
- list_allowed_directories: the canonical sandbox roots, one per line
- list_directory: immediate children of a directory, directories first

Security: every path goes through the session's PathResolver. Symlinks are
not listed, so a listing never reveals what a link points at.
"""
import logging
import os
from pathlib import Path
from typing import Any

from claude_agent_sdk import create_sdk_mcp_server, tool

from src.core.errors import FsError, io_error_message
from src.core.formatting import format_date, format_size
from src.core.path_resolver import ResolutionIntent, get_path_resolver

from ..common import tool_error, tool_result

logger = logging.getLogger(__name__)

# Tool name constants
FSGATE_LIST_ALLOWED_TOOL: str = "mcp__fsgate__list_allowed_directories"
FSGATE_LIST_DIRECTORY_TOOL: str = "mcp__fsgate__list_directory"

# Maximum entries to return
MAX_DIR_ENTRIES: int = 1000


def format_directory_listing(directory: Path, max_entries: int = MAX_DIR_ENTRIES) -> str:
    """
    Render the immediate children of a canonical directory.

    Entries whose metadata cannot be read are skipped.

    Raises:
        OSError: If the directory itself cannot be read
    """
    dirs: list[str] = []
    files: list[tuple[str, int, float]] = []

    with os.scandir(directory) as it:
        for entry in it:
            try:
                if entry.is_dir(follow_symlinks=False):
                    dirs.append(entry.name)
                elif entry.is_file(follow_symlinks=False):
                    st = entry.stat(follow_symlinks=False)
                    files.append((entry.name, st.st_size, st.st_mtime))
            except OSError:
                continue

    dirs.sort()
    files.sort(key=lambda item: item[0])

    lines = [f"[DIR]  {name}/" for name in dirs]
    lines.extend(
        f"[FILE] {name} ({format_size(size)}, {format_date(mtime)})"
        for name, size, mtime in files
    )

    if not lines:
        return "(empty directory)"

    total = len(lines)
    if total > max_entries:
        lines = lines[:max_entries]
        lines.append(
            f"\n(Showing first {max_entries} of {total} entries. "
            "Use search_files to find specific files.)"
        )
    return "\n".join(lines)


async def _list_allowed_directories_impl(session_id: str) -> dict[str, Any]:
    """List the sandbox roots - testable without MCP tool wrapper."""
    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateList: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    return tool_result("\n".join(str(root) for root in resolver.roots))


async def _list_directory_impl(session_id: str, path: str) -> dict[str, Any]:
    """
    Core list_directory implementation - testable without MCP tool wrapper.

    Args:
        session_id: The session ID (used to get the PathResolver)
        path: Directory to list

    Returns:
        Dict with result or error
    """
    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateList: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = resolver.resolve(path, ResolutionIntent.MUST_BE_DIRECTORY)
    except FsError as e:
        logger.warning(f"FsGateList: Rejected '{path}' - {e}")
        return tool_error(str(e))

    try:
        listing = format_directory_listing(resolved.canonical)
    except OSError as e:
        return tool_error(io_error_message(e, path))

    logger.info(f"FsGateList: Listed {resolved.canonical}")
    return tool_result(listing)


def create_list_allowed_directories_tool(session_id: str):
    """
    Create the list_allowed_directories tool bound to a session.

    Args:
        session_id: The session ID (used to get the PathResolver)

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "list_allowed_directories",
        "Lists all directories that this server is allowed to access. Returns "
        "each allowed directory on its own line as a fully canonicalized path.",
        {"type": "object", "properties": {}},
    )
    async def list_allowed_directories(args: dict[str, Any]) -> dict[str, Any]:
        return await _list_allowed_directories_impl(bound_session_id)

    return list_allowed_directories


def create_list_directory_tool(session_id: str):
    """
    Create the list_directory tool bound to a session.

    Args:
        session_id: The session ID (used to get the PathResolver)

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "list_directory",
        """Lists the contents of a directory.

Returns entries sorted with directories first, then files, each
alphabetically. Each entry shows type, name, and for files, size and
modification date.

Args:
    path: Directory to list

Examples:
    list_directory(path="/srv/projects")
""",
        {"path": str},
    )
    async def list_directory(args: dict[str, Any]) -> dict[str, Any]:
        """List directory contents."""
        return await _list_directory_impl(bound_session_id, args.get("path", ""))

    return list_directory


def create_fsgate_list_mcp_server(
    session_id: str,
    server_name: str = "fsgate",
    version: str = "1.0.0",
):
    """
    Create an in-process MCP server with only the listing tools.

    Returns:
        McpSdkServerConfig for use in ClaudeAgentOptions.mcp_servers.
    """
    tools = [
        create_list_allowed_directories_tool(session_id=session_id),
        create_list_directory_tool(session_id=session_id),
    ]

    logger.info(f"Created FsGateList MCP server for session {session_id}")

    return create_sdk_mcp_server(
        name=server_name,
        version=version,
        tools=tools,
    )
