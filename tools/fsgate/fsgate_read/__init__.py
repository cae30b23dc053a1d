"""FsGateRead - sandboxed text file reading."""
from .tool import (
    BINARY_CHECK_SIZE,
    FSGATE_READ_FILE_TOOL,
    FSGATE_READ_MULTIPLE_TOOL,
    create_fsgate_read_mcp_server,
    create_read_file_tool,
    create_read_multiple_files_tool,
    read_file_range,
    split_lines,
)

__all__ = [
    "BINARY_CHECK_SIZE",
    "FSGATE_READ_FILE_TOOL",
    "FSGATE_READ_MULTIPLE_TOOL",
    "create_fsgate_read_mcp_server",
    "create_read_file_tool",
    "create_read_multiple_files_tool",
    "read_file_range",
    "split_lines",
]
