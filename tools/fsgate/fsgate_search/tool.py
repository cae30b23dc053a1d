"""
FsGateSearch - glob search over a sandboxed directory tree.

Patterns are matched against the path of each regular file relative to the
search directory, using '/' as separator:

    *.py          Python files directly in the search directory
    **/*.py       Python files at any depth
    src/**/test_*.py
    *.{yml,yaml}

Traversal depth is bounded by the configured max_depth and the number of
results by max_results (default 50, at most 200).
"""
import logging
from typing import Any

from claude_agent_sdk import create_sdk_mcp_server, tool

from src.core.errors import FsError, io_error_message
from src.core.formatting import format_size
from src.core.path_resolver import ResolutionIntent, get_path_resolver
from src.core.traversal import (
    DEFAULT_SEARCH_RESULTS,
    MAX_SEARCH_RESULTS,
    SearchResult,
    search_files,
)

from ..common import optional_int, run_walk, tool_error, tool_result

logger = logging.getLogger(__name__)

# Tool name constant
FSGATE_SEARCH_TOOL: str = "mcp__fsgate__search_files"


def format_search_results(result: SearchResult) -> str:
    if not result.matches:
        return f'No matches found for pattern "{result.pattern}" in {result.root}'

    count = len(result.matches)
    noun = "match" if count == 1 else "matches"
    suffix = " (results truncated)" if result.truncated else ""
    output = f'Found {count} {noun} for pattern "{result.pattern}" in {result.root}{suffix}:\n\n'
    for match in result.matches:
        output += f"{match.path} ({format_size(match.size)})\n"
    return output


async def _search_files_impl(
    session_id: str,
    path: str,
    pattern: str,
    max_results: Any = None,
) -> dict[str, Any]:
    """
    Core search_files implementation - testable without MCP tool wrapper.

    Args:
        session_id: The session ID (used to get the PathResolver)
        path: Directory to search from
        pattern: Glob pattern matched against relative paths
        max_results: Result cap (default 50, clamped to 1..200)

    Returns:
        Dict with result or error
    """
    try:
        limit = optional_int(max_results, "max_results")
    except ValueError as e:
        return tool_error(str(e))

    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateSearch: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = resolver.resolve(path, ResolutionIntent.MUST_BE_DIRECTORY)
        result = await run_walk(
            search_files,
            resolved.canonical,
            pattern,
            resolver.max_depth,
            limit,
        )
    except FsError as e:
        logger.warning(f"FsGateSearch: Rejected search '{pattern}' in '{path}' - {e}")
        return tool_error(str(e))
    except OSError as e:
        return tool_error(io_error_message(e, path))

    logger.info(
        f"FsGateSearch: Pattern '{pattern}' in {resolved.canonical} matched "
        f"{len(result.matches)} file(s) (truncated={result.truncated})"
    )
    return tool_result(format_search_results(result))


def create_search_files_tool(session_id: str):
    """
    Create the search_files tool bound to a session.

    Args:
        session_id: The session ID (used to get the PathResolver)

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "search_files",
        """Searches for files matching a glob pattern within a directory tree.

Returns matched file paths with sizes. Use '*.ext' for files in the root
directory, '**/*.ext' for recursive matching.

Args:
    path: Directory to search from
    pattern: Glob pattern (supports *, ?, [...], ** and {a,b})
    max_results: Maximum number of results (default: 50, max: 200)

Examples:
    search_files(path="/srv/projects", pattern="**/*.py")
    search_files(path="/srv/projects", pattern="*.{yml,yaml}", max_results=10)
""",
        {
            "type": "object",
            "properties": {
                "path": {"type": "string"},
                "pattern": {"type": "string"},
                "max_results": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": MAX_SEARCH_RESULTS,
                    "default": DEFAULT_SEARCH_RESULTS,
                    "description": (
                        f"Maximum number of results to return "
                        f"(default: {DEFAULT_SEARCH_RESULTS}, max: {MAX_SEARCH_RESULTS})"
                    ),
                },
            },
            "required": ["path", "pattern"],
        },
    )
    async def search(args: dict[str, Any]) -> dict[str, Any]:
        """Search for files by glob pattern."""
        return await _search_files_impl(
            session_id=bound_session_id,
            path=args.get("path", ""),
            pattern=args.get("pattern", ""),
            max_results=args.get("max_results"),
        )

    return search


def create_fsgate_search_mcp_server(
    session_id: str,
    server_name: str = "fsgate",
    version: str = "1.0.0",
):
    """
    Create an in-process MCP server for the search_files tool.

    Returns:
        McpSdkServerConfig for use in ClaudeAgentOptions.mcp_servers.
    """
    search_tool = create_search_files_tool(session_id=session_id)

    logger.info(f"Created FsGateSearch MCP server for session {session_id}")

    return create_sdk_mcp_server(
        name=server_name,
        version=version,
        tools=[search_tool],
    )
