"""
FsGateInfo - file metadata and directory trees.

Tools:
- get_file_info: type, size, MIME type, timestamps and permissions
- directory_tree: box-drawing tree of a directory, depth and size bounded

The tree walk runs in the default executor and stops early if the calling
task is cancelled.
"""
import logging
import mimetypes
import os
import stat
from pathlib import Path
from typing import Any, Optional

from claude_agent_sdk import create_sdk_mcp_server, tool

from src.core.errors import FsError, io_error_message
from src.core.formatting import format_date, format_permissions, format_size
from src.core.path_resolver import ResolutionIntent, get_path_resolver
from src.core.traversal import build_directory_tree

from ..common import optional_int, run_walk, tool_error, tool_result

logger = logging.getLogger(__name__)

# Tool name constants
FSGATE_FILE_INFO_TOOL: str = "mcp__fsgate__get_file_info"
FSGATE_DIRECTORY_TREE_TOOL: str = "mcp__fsgate__directory_tree"

DEFAULT_MIME_TYPE: str = "application/octet-stream"


def describe_path(canonical: Path) -> str:
    """Render the metadata block for a canonical path."""
    st = os.lstat(canonical)

    if stat.S_ISREG(st.st_mode):
        file_type = "file"
    elif stat.S_ISDIR(st.st_mode):
        file_type = "directory"
    elif stat.S_ISLNK(st.st_mode):
        file_type = "symlink"
    else:
        file_type = "other"

    if file_type == "file":
        mime = mimetypes.guess_type(canonical.name)[0] or DEFAULT_MIME_TYPE
    else:
        mime = "N/A"

    # Birth time is not exposed on every platform
    birthtime: Optional[float] = getattr(st, "st_birthtime", None)
    created = format_date(birthtime) if birthtime is not None else "unknown"

    return (
        f"Path: {canonical}\n"
        f"Type: {file_type}\n"
        f"Size: {format_size(st.st_size)}\n"
        f"MIME: {mime}\n"
        f"Modified: {format_date(st.st_mtime)}\n"
        f"Created: {created}\n"
        f"Permissions: {format_permissions(st)}"
    )


async def _get_file_info_impl(session_id: str, path: str) -> dict[str, Any]:
    """Core get_file_info implementation - testable without MCP tool wrapper."""
    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateInfo: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = resolver.resolve(path, ResolutionIntent.MUST_EXIST)
        info = describe_path(resolved.canonical)
    except FsError as e:
        logger.warning(f"FsGateInfo: Rejected '{path}' - {e}")
        return tool_error(str(e))
    except OSError as e:
        return tool_error(io_error_message(e, path))

    return tool_result(info)


async def _directory_tree_impl(
    session_id: str,
    path: str,
    max_depth: Any = None,
) -> dict[str, Any]:
    """
    Core directory_tree implementation - testable without MCP tool wrapper.

    Args:
        session_id: The session ID (used to get the PathResolver)
        path: Directory to render
        max_depth: Depth override; defaults to the configured maximum

    Returns:
        Dict with result or error
    """
    try:
        depth_override = optional_int(max_depth, "max_depth")
    except ValueError as e:
        return tool_error(str(e))

    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateInfo: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    depth = resolver.max_depth if depth_override is None else depth_override

    try:
        resolved = resolver.resolve(path, ResolutionIntent.MUST_BE_DIRECTORY)
        tree = await run_walk(build_directory_tree, resolved.canonical, depth)
    except FsError as e:
        logger.warning(f"FsGateInfo: Rejected '{path}' - {e}")
        return tool_error(str(e))
    except OSError as e:
        return tool_error(io_error_message(e, path))

    logger.info(
        f"FsGateInfo: Rendered tree of {resolved.canonical} "
        f"({tree.entry_count} entries, depth={depth}, truncated={tree.truncated})"
    )
    return tool_result(f"{resolved.canonical}/\n{tree.render()}")


def create_get_file_info_tool(session_id: str):
    """
    Create the get_file_info tool bound to a session.

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "get_file_info",
        "Returns detailed metadata about a file or directory including size, "
        "type, MIME type, timestamps, and permissions.",
        {"path": str},
    )
    async def get_file_info(args: dict[str, Any]) -> dict[str, Any]:
        return await _get_file_info_impl(bound_session_id, args.get("path", ""))

    return get_file_info


def create_directory_tree_tool(session_id: str):
    """
    Create the directory_tree tool bound to a session.

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "directory_tree",
        """Displays a visual tree of directory structure with box-drawing characters.

Shows directories first (sorted), then files with sizes. Hidden
files and directories (starting with '.') are skipped. Output stops
after 1000 entries.

Args:
    path: Directory to render
    max_depth: Maximum depth to traverse (optional)
""",
        {
            "type": "object",
            "properties": {
                "path": {"type": "string"},
                "max_depth": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Maximum depth to traverse",
                },
            },
            "required": ["path"],
        },
    )
    async def directory_tree(args: dict[str, Any]) -> dict[str, Any]:
        return await _directory_tree_impl(
            session_id=bound_session_id,
            path=args.get("path", ""),
            max_depth=args.get("max_depth"),
        )

    return directory_tree


def create_fsgate_info_mcp_server(
    session_id: str,
    server_name: str = "fsgate",
    version: str = "1.0.0",
):
    """
    Create an in-process MCP server with only the info tools.

    Returns:
        McpSdkServerConfig for use in ClaudeAgentOptions.mcp_servers.
    """
    tools = [
        create_get_file_info_tool(session_id=session_id),
        create_directory_tree_tool(session_id=session_id),
    ]

    logger.info(f"Created FsGateInfo MCP server for session {session_id}")

    return create_sdk_mcp_server(
        name=server_name,
        version=version,
        tools=tools,
    )
