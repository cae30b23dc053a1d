"""
FsGateDestructive - deletion and moves inside the sandbox.

Tools:
- delete_file: remove a single regular file
- move_file: rename a file or directory; both ends must be inside a root
- delete_directory: remove an empty directory (never recursive)

These tools are only registered when the server runs with allow_destructive.
A sandbox root itself can be neither deleted nor moved.
"""
import logging
import os
from typing import Any

from claude_agent_sdk import create_sdk_mcp_server, tool

from src.core.errors import FsError, PathDenied, io_error_message
from src.core.path_resolver import PathResolver, ResolutionIntent, ResolvedPath, get_path_resolver

from ..common import tool_error, tool_result

logger = logging.getLogger(__name__)

# Tool name constants
FSGATE_DELETE_FILE_TOOL: str = "mcp__fsgate__delete_file"
FSGATE_MOVE_FILE_TOOL: str = "mcp__fsgate__move_file"
FSGATE_DELETE_DIRECTORY_TOOL: str = "mcp__fsgate__delete_directory"


def _resolve_removable(
    resolver: PathResolver, raw_path: str, intent: ResolutionIntent
) -> ResolvedPath:
    """Resolve a path that is about to disappear or be replaced; sandbox roots are refused."""
    resolved = resolver.resolve(raw_path, intent)
    if resolver.is_root(resolved.canonical):
        raise PathDenied(raw_path)
    return resolved


async def _delete_file_impl(session_id: str, path: str) -> dict[str, Any]:
    """Core delete_file implementation - testable without MCP tool wrapper."""
    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateDestructive: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = _resolve_removable(resolver, path, ResolutionIntent.MUST_BE_FILE)
        os.remove(resolved.canonical)
    except FsError as e:
        logger.warning(f"FsGateDestructive: Rejected delete of '{path}' - {e}")
        return tool_error(str(e))
    except OSError as e:
        return tool_error(io_error_message(e, path))

    logger.info(f"FsGateDestructive: Deleted file {resolved.canonical}")
    return tool_result(f"Deleted file {resolved.canonical}")


async def _move_file_impl(session_id: str, source: str, destination: str) -> dict[str, Any]:
    """
    Core move_file implementation - testable without MCP tool wrapper.

    Args:
        session_id: The session ID (used to get the PathResolver)
        source: Existing file or directory to move
        destination: New path; its parent must already exist and it may not
            be a sandbox root

    Returns:
        Dict with result or error
    """
    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateDestructive: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved_source = _resolve_removable(resolver, source, ResolutionIntent.MUST_EXIST)
        resolved_dest = _resolve_removable(resolver, destination, ResolutionIntent.MAY_NOT_EXIST)
    except FsError as e:
        logger.warning(f"FsGateDestructive: Rejected move '{source}' -> '{destination}' - {e}")
        return tool_error(str(e))

    try:
        os.rename(resolved_source.canonical, resolved_dest.canonical)
    except OSError as e:
        return tool_error(io_error_message(e, source))

    logger.info(
        f"FsGateDestructive: Moved {resolved_source.canonical} to {resolved_dest.canonical}"
    )
    return tool_result(f"Moved {resolved_source.canonical} to {resolved_dest.canonical}")


async def _delete_directory_impl(session_id: str, path: str) -> dict[str, Any]:
    """Core delete_directory implementation - testable without MCP tool wrapper."""
    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateDestructive: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = _resolve_removable(resolver, path, ResolutionIntent.MUST_BE_DIRECTORY)
        os.rmdir(resolved.canonical)
    except FsError as e:
        logger.warning(f"FsGateDestructive: Rejected rmdir '{path}' - {e}")
        return tool_error(str(e))
    except OSError as e:
        return tool_error(io_error_message(e, path))

    logger.info(f"FsGateDestructive: Deleted directory {resolved.canonical}")
    return tool_result(f"Deleted directory {resolved.canonical}")


def create_delete_file_tool(session_id: str):
    """
    Create the delete_file tool bound to a session.

    Args:
        session_id: The session ID (used to get the PathResolver)

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "delete_file",
        "Deletes a single file. The file must exist and be a regular file "
        "(not a directory).",
        {"path": str},
    )
    async def delete_file(args: dict[str, Any]) -> dict[str, Any]:
        return await _delete_file_impl(bound_session_id, args.get("path", ""))

    return delete_file


def create_move_file_tool(session_id: str):
    """
    Create the move_file tool bound to a session.

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "move_file",
        """Moves or renames a file or directory.

Both source and destination must be within allowed directories. The
source must exist and the destination's parent directory must exist.

Args:
    source: Path to move
    destination: New path
""",
        {"source": str, "destination": str},
    )
    async def move_file(args: dict[str, Any]) -> dict[str, Any]:
        return await _move_file_impl(
            session_id=bound_session_id,
            source=args.get("source", ""),
            destination=args.get("destination", ""),
        )

    return move_file


def create_delete_directory_tool(session_id: str):
    """
    Create the delete_directory tool bound to a session.

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "delete_directory",
        "Deletes an empty directory. The directory must exist and be empty. "
        "Does NOT recursively delete contents.",
        {"path": str},
    )
    async def delete_directory(args: dict[str, Any]) -> dict[str, Any]:
        return await _delete_directory_impl(bound_session_id, args.get("path", ""))

    return delete_directory


def create_fsgate_destructive_mcp_server(
    session_id: str,
    server_name: str = "fsgate",
    version: str = "1.0.0",
):
    """
    Create an in-process MCP server with only the destructive tools.

    Returns:
        McpSdkServerConfig for use in ClaudeAgentOptions.mcp_servers.
    """
    tools = [
        create_delete_file_tool(session_id=session_id),
        create_move_file_tool(session_id=session_id),
        create_delete_directory_tool(session_id=session_id),
    ]

    logger.info(f"Created FsGateDestructive MCP server for session {session_id}")

    return create_sdk_mcp_server(
        name=server_name,
        version=version,
        tools=tools,
    )
