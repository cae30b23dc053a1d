"""FsGateInfo - file metadata and directory trees."""
from .tool import (
    DEFAULT_MIME_TYPE,
    FSGATE_DIRECTORY_TREE_TOOL,
    FSGATE_FILE_INFO_TOOL,
    create_directory_tree_tool,
    create_fsgate_info_mcp_server,
    create_get_file_info_tool,
    describe_path,
)

__all__ = [
    "DEFAULT_MIME_TYPE",
    "FSGATE_DIRECTORY_TREE_TOOL",
    "FSGATE_FILE_INFO_TOOL",
    "create_directory_tree_tool",
    "create_fsgate_info_mcp_server",
    "create_get_file_info_tool",
    "describe_path",
]
