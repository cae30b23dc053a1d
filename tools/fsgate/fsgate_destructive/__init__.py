"""FsGateDestructive - deletion and moves inside the sandbox."""
from .tool import (
    FSGATE_DELETE_DIRECTORY_TOOL,
    FSGATE_DELETE_FILE_TOOL,
    FSGATE_MOVE_FILE_TOOL,
    create_delete_directory_tool,
    create_delete_file_tool,
    create_fsgate_destructive_mcp_server,
    create_move_file_tool,
)

__all__ = [
    "FSGATE_DELETE_DIRECTORY_TOOL",
    "FSGATE_DELETE_FILE_TOOL",
    "FSGATE_MOVE_FILE_TOOL",
    "create_delete_directory_tool",
    "create_delete_file_tool",
    "create_fsgate_destructive_mcp_server",
    "create_move_file_tool",
]
