"""
fsgate filesystem tools package.

Every tool resolves caller paths through the session's PathResolver before
touching the filesystem, so all operations stay inside the configured
sandbox roots.

Tool groups:
- fsgate_list / fsgate_read / fsgate_info / fsgate_search: read-only
- fsgate_write: write_file, edit_file, create_directory (allow_write)
- fsgate_destructive: delete_file, move_file, delete_directory (allow_destructive)
"""
from .fsgate_list import (
    create_list_allowed_directories_tool,
    create_list_directory_tool,
    create_fsgate_list_mcp_server,
)
from .fsgate_read import (
    create_read_file_tool,
    create_read_multiple_files_tool,
    create_fsgate_read_mcp_server,
)
from .fsgate_info import (
    create_get_file_info_tool,
    create_directory_tree_tool,
    create_fsgate_info_mcp_server,
)
from .fsgate_search import (
    create_search_files_tool,
    create_fsgate_search_mcp_server,
)
from .fsgate_write import (
    create_write_file_tool,
    create_edit_file_tool,
    create_create_directory_tool,
    create_fsgate_write_mcp_server,
)
from .fsgate_destructive import (
    create_delete_file_tool,
    create_move_file_tool,
    create_delete_directory_tool,
    create_fsgate_destructive_mcp_server,
)
from .fsgate_file_tools import (
    SERVER_INSTRUCTIONS,
    SERVER_NAME,
    create_fsgate_tools,
    create_fsgate_tools_mcp_server,
)

__all__ = [
    # Unified server
    "SERVER_INSTRUCTIONS",
    "SERVER_NAME",
    "create_fsgate_tools",
    "create_fsgate_tools_mcp_server",
    # Individual tool creation functions
    "create_list_allowed_directories_tool",
    "create_list_directory_tool",
    "create_read_file_tool",
    "create_read_multiple_files_tool",
    "create_get_file_info_tool",
    "create_directory_tree_tool",
    "create_search_files_tool",
    "create_write_file_tool",
    "create_edit_file_tool",
    "create_create_directory_tool",
    "create_delete_file_tool",
    "create_move_file_tool",
    "create_delete_directory_tool",
    # Per-group MCP servers
    "create_fsgate_list_mcp_server",
    "create_fsgate_read_mcp_server",
    "create_fsgate_info_mcp_server",
    "create_fsgate_search_mcp_server",
    "create_fsgate_write_mcp_server",
    "create_fsgate_destructive_mcp_server",
]
