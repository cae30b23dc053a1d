"""FsGateSearch - glob search over a sandboxed directory tree."""
from .tool import (
    FSGATE_SEARCH_TOOL,
    create_fsgate_search_mcp_server,
    create_search_files_tool,
    format_search_results,
)

__all__ = [
    "FSGATE_SEARCH_TOOL",
    "create_fsgate_search_mcp_server",
    "create_search_files_tool",
    "format_search_results",
]
