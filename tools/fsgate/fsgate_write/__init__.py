"""FsGateWrite - sandboxed file creation and modification."""
from .tool import (
    FSGATE_CREATE_DIRECTORY_TOOL,
    FSGATE_EDIT_FILE_TOOL,
    FSGATE_WRITE_FILE_TOOL,
    apply_edits,
    create_create_directory_tool,
    create_edit_file_tool,
    create_fsgate_write_mcp_server,
    create_write_file_tool,
    unified_diff,
)

__all__ = [
    "FSGATE_CREATE_DIRECTORY_TOOL",
    "FSGATE_EDIT_FILE_TOOL",
    "FSGATE_WRITE_FILE_TOOL",
    "apply_edits",
    "create_create_directory_tool",
    "create_edit_file_tool",
    "create_fsgate_write_mcp_server",
    "create_write_file_tool",
    "unified_diff",
]
