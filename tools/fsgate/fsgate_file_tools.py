"""
Combined fsgate tools MCP server.

Creates a single MCP server named 'fsgate' containing every tool the
session is permitted to use. Tool names are consistent across servers:
mcp__fsgate__read_file, mcp__fsgate__write_file, and so on.

Tool sets:
- read-only (always): list_allowed_directories, list_directory, read_file,
  read_multiple_files, get_file_info, directory_tree, search_files
- write (allow_write): write_file, edit_file, create_directory
- destructive (allow_destructive): delete_file, move_file, delete_directory

allow_destructive implies allow_write.
"""
import logging
from typing import Any

from claude_agent_sdk import create_sdk_mcp_server

from .fsgate_list import create_list_allowed_directories_tool, create_list_directory_tool
from .fsgate_read import create_read_file_tool, create_read_multiple_files_tool
from .fsgate_info import create_directory_tree_tool, create_get_file_info_tool
from .fsgate_search import create_search_files_tool
from .fsgate_write import (
    create_create_directory_tool,
    create_edit_file_tool,
    create_write_file_tool,
)
from .fsgate_destructive import (
    create_delete_directory_tool,
    create_delete_file_tool,
    create_move_file_tool,
)

logger = logging.getLogger(__name__)

SERVER_NAME: str = "fsgate"

SERVER_INSTRUCTIONS: str = (
    "Secure filesystem access server. "
    "Use list_allowed_directories to see available paths."
)


def create_fsgate_tools(
    session_id: str,
    max_read_size: int,
    allow_write: bool = False,
    allow_destructive: bool = False,
) -> list[Any]:
    """
    Build the tool list for a session according to its permissions.

    Returns:
        SdkMcpTool instances, read-only tools first.
    """
    tools = [
        create_list_allowed_directories_tool(session_id=session_id),
        create_list_directory_tool(session_id=session_id),
        create_read_file_tool(session_id=session_id, max_read_size=max_read_size),
        create_read_multiple_files_tool(session_id=session_id, max_read_size=max_read_size),
        create_get_file_info_tool(session_id=session_id),
        create_directory_tree_tool(session_id=session_id),
        create_search_files_tool(session_id=session_id),
    ]

    if allow_write or allow_destructive:
        tools.extend([
            create_write_file_tool(session_id=session_id),
            create_edit_file_tool(session_id=session_id),
            create_create_directory_tool(session_id=session_id),
        ])

    if allow_destructive:
        tools.extend([
            create_delete_file_tool(session_id=session_id),
            create_move_file_tool(session_id=session_id),
            create_delete_directory_tool(session_id=session_id),
        ])

    return tools


def create_fsgate_tools_mcp_server(
    session_id: str,
    max_read_size: int,
    allow_write: bool = False,
    allow_destructive: bool = False,
    server_name: str = SERVER_NAME,
    version: str = "1.0.0",
) -> Any:
    """
    Create a unified MCP server containing the session's fsgate tools.

    The session's PathResolver must be configured before any tool is
    called (see configure_path_resolver).

    Args:
        session_id: The session ID for PathResolver lookup.
        max_read_size: Size ceiling in bytes for whole-file reads.
        allow_write: Register write_file, edit_file and create_directory.
        allow_destructive: Register delete_file, move_file and
            delete_directory (and the write tools).
        server_name: MCP server name (default: "fsgate").
        version: Server version.

    Returns:
        McpSdkServerConfig for use in ClaudeAgentOptions.mcp_servers. Its
        "instance" is an mcp Server that can also be run over stdio.
    """
    tools = create_fsgate_tools(
        session_id=session_id,
        max_read_size=max_read_size,
        allow_write=allow_write,
        allow_destructive=allow_destructive,
    )

    tool_names = [t.name for t in tools]
    logger.info(
        f"Created unified fsgate MCP server for session {session_id} "
        f"with {len(tools)} tools (write: {allow_write or allow_destructive}, "
        f"destructive: {allow_destructive}): {tool_names}"
    )

    server_config = create_sdk_mcp_server(
        name=server_name,
        version=version,
        tools=tools,
    )
    server_config["instance"].instructions = SERVER_INSTRUCTIONS
    return server_config
