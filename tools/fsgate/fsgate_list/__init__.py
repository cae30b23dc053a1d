"""FsGateList - sandbox root discovery and directory listing."""
from .tool import (
    FSGATE_LIST_ALLOWED_TOOL,
    FSGATE_LIST_DIRECTORY_TOOL,
    MAX_DIR_ENTRIES,
    create_fsgate_list_mcp_server,
    create_list_allowed_directories_tool,
    create_list_directory_tool,
    format_directory_listing,
)

__all__ = [
    "FSGATE_LIST_ALLOWED_TOOL",
    "FSGATE_LIST_DIRECTORY_TOOL",
    "MAX_DIR_ENTRIES",
    "create_fsgate_list_mcp_server",
    "create_list_allowed_directories_tool",
    "create_list_directory_tool",
    "format_directory_listing",
]
