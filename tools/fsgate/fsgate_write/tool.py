"""
FsGateWrite - Sandboxed file creation and modification.

Tools:
- write_file: create or overwrite a file; the parent directory must exist
- edit_file: apply exact-text replacements and return a unified diff
- create_directory: mkdir -p, succeeding if the directory already exists

These tools are only registered when the server runs with allow_write.

Security:
- write_file resolves with MAY_NOT_EXIST, so the parent is canonicalised and
  must sit inside a sandbox root
- create_directory resolves with CREATABLE, which rejects any '.' or '..'
  component before anything is created
"""
import difflib
import logging
from typing import Any

from claude_agent_sdk import create_sdk_mcp_server, tool

from src.core.errors import EditFailed, FsError, io_error_message
from src.core.formatting import format_size
from src.core.path_resolver import ResolutionIntent, get_path_resolver

from ..common import tool_error, tool_result

logger = logging.getLogger(__name__)

# Tool name constants
FSGATE_WRITE_FILE_TOOL: str = "mcp__fsgate__write_file"
FSGATE_EDIT_FILE_TOOL: str = "mcp__fsgate__edit_file"
FSGATE_CREATE_DIRECTORY_TOOL: str = "mcp__fsgate__create_directory"

# old_text is cut to this many characters in error messages
EDIT_PREVIEW_CHARS: int = 80


def apply_edits(content: str, edits: list[dict[str, str]], display_path: str) -> str:
    """
    Apply exact-text replacements in order.

    Each edit sees the result of the previous ones and its old_text must
    occur exactly once in that intermediate text.

    Raises:
        EditFailed: On the first edit whose old_text is missing or ambiguous
    """
    for edit in edits:
        old_text = edit["old_text"]
        preview = repr(old_text[:EDIT_PREVIEW_CHARS])
        count = content.count(old_text)
        if count == 0:
            raise EditFailed(display_path, f"old_text not found: {preview}")
        if count > 1:
            raise EditFailed(
                display_path,
                f"old_text matches {count} locations (must be unique): {preview}",
            )
        content = content.replace(old_text, edit["new_text"], 1)
    return content


def unified_diff(original: str, updated: str, label: str) -> str:
    diff = difflib.unified_diff(
        original.splitlines(),
        updated.splitlines(),
        fromfile=label,
        tofile=label,
        lineterm="",
    )
    return "\n".join(diff)


def _validate_edits(edits: Any) -> list[dict[str, str]]:
    if not isinstance(edits, list) or not edits:
        raise ValueError("edits must be a non-empty list")
    for index, edit in enumerate(edits):
        if not isinstance(edit, dict):
            raise ValueError(f"edits[{index}] must be an object")
        for key in ("old_text", "new_text"):
            if not isinstance(edit.get(key), str):
                raise ValueError(f"edits[{index}].{key} must be a string")
    return edits


async def _write_file_impl(session_id: str, file_path: str, content: str) -> dict[str, Any]:
    """
    Core write_file implementation - testable without MCP tool wrapper.

    Args:
        session_id: The session ID (used to get the PathResolver)
        file_path: File to create or overwrite
        content: Text to write (UTF-8)

    Returns:
        Dict with result or error
    """
    if not isinstance(content, str):
        return tool_error("content must be a string")

    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateWrite: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = resolver.resolve(file_path, ResolutionIntent.MAY_NOT_EXIST)
    except FsError as e:
        logger.warning(f"FsGateWrite: Rejected write to '{file_path}' - {e}")
        return tool_error(str(e))

    data = content.encode("utf-8")
    try:
        resolved.canonical.write_bytes(data)
    except OSError as e:
        return tool_error(io_error_message(e, file_path))

    logger.info(f"FsGateWrite: Wrote {len(data)} bytes to {resolved.canonical}")
    return tool_result(f"Wrote {format_size(len(data))} to {resolved.canonical}")


async def _edit_file_impl(session_id: str, file_path: str, edits: Any) -> dict[str, Any]:
    """
    Core edit_file implementation - testable without MCP tool wrapper.

    The file is only rewritten when every edit applies; on failure it is
    left untouched.
    """
    try:
        checked_edits = _validate_edits(edits)
    except ValueError as e:
        return tool_error(str(e))

    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateWrite: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = resolver.resolve(file_path, ResolutionIntent.MUST_BE_FILE)
        try:
            original = resolved.canonical.read_bytes().decode("utf-8")
        except UnicodeDecodeError:
            raise EditFailed(file_path, "file is not valid UTF-8 text")
        updated = apply_edits(original, checked_edits, file_path)
        resolved.canonical.write_bytes(updated.encode("utf-8"))
    except FsError as e:
        logger.warning(f"FsGateWrite: Rejected edit of '{file_path}' - {e}")
        return tool_error(str(e))
    except OSError as e:
        return tool_error(io_error_message(e, file_path))

    logger.info(f"FsGateWrite: Applied {len(checked_edits)} edit(s) to {resolved.canonical}")
    return tool_result(
        f"Applied {len(checked_edits)} edit(s) to {resolved.canonical}\n\n"
        f"{unified_diff(original, updated, file_path)}"
    )


async def _create_directory_impl(session_id: str, path: str) -> dict[str, Any]:
    """Core create_directory implementation - testable without MCP tool wrapper."""
    try:
        resolver = get_path_resolver(session_id)
    except RuntimeError as e:
        logger.error(f"FsGateWrite: PathResolver not configured - {e}")
        return tool_error(f"Internal error: {e}")

    try:
        resolved = resolver.resolve(path, ResolutionIntent.CREATABLE)
    except FsError as e:
        logger.warning(f"FsGateWrite: Rejected mkdir '{path}' - {e}")
        return tool_error(str(e))

    try:
        resolved.canonical.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return tool_error(io_error_message(e, path))

    logger.info(f"FsGateWrite: Created directory {resolved.canonical}")
    return tool_result(f"Created directory {resolved.canonical}")


def create_write_file_tool(session_id: str):
    """
    Create the write_file tool bound to a session.

    Args:
        session_id: The session ID (used to get the PathResolver)

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "write_file",
        """Creates a new file or overwrites an existing file with the provided content.

Parent directory must already exist (use create_directory first).

Args:
    path: File to write
    content: Full file content

Examples:
    write_file(path="/srv/projects/notes.txt", content="Hello")
""",
        {"path": str, "content": str},
    )
    async def write_file(args: dict[str, Any]) -> dict[str, Any]:
        """Write content to a file."""
        return await _write_file_impl(
            session_id=bound_session_id,
            file_path=args.get("path", ""),
            content=args.get("content", ""),
        )

    return write_file


def create_edit_file_tool(session_id: str):
    """
    Create the edit_file tool bound to a session.

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "edit_file",
        """Applies a sequence of exact-text replacements to a file.

Each edit must match exactly one location in the text produced by the
edits before it. If any edit fails, the file is left unchanged.
Returns a unified diff of all changes.

Args:
    path: File to edit
    edits: List of {"old_text": ..., "new_text": ...} objects
""",
        {
            "type": "object",
            "properties": {
                "path": {"type": "string"},
                "edits": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "old_text": {"type": "string"},
                            "new_text": {"type": "string"},
                        },
                        "required": ["old_text", "new_text"],
                    },
                },
            },
            "required": ["path", "edits"],
        },
    )
    async def edit_file(args: dict[str, Any]) -> dict[str, Any]:
        """Apply exact-text edits to a file."""
        return await _edit_file_impl(
            session_id=bound_session_id,
            file_path=args.get("path", ""),
            edits=args.get("edits"),
        )

    return edit_file


def create_create_directory_tool(session_id: str):
    """
    Create the create_directory tool bound to a session.

    Returns:
        Tool function decorated with @tool.
    """
    bound_session_id = session_id

    @tool(
        "create_directory",
        "Creates a directory and any necessary parent directories (like "
        "mkdir -p). Succeeds silently if the directory already exists.",
        {"path": str},
    )
    async def create_directory(args: dict[str, Any]) -> dict[str, Any]:
        return await _create_directory_impl(bound_session_id, args.get("path", ""))

    return create_directory


def create_fsgate_write_mcp_server(
    session_id: str,
    server_name: str = "fsgate",
    version: str = "1.0.0",
):
    """
    Create an in-process MCP server with only the write tools.

    Returns:
        McpSdkServerConfig for use in ClaudeAgentOptions.mcp_servers.
    """
    tools = [
        create_write_file_tool(session_id=session_id),
        create_edit_file_tool(session_id=session_id),
        create_create_directory_tool(session_id=session_id),
    ]

    logger.info(f"Created FsGateWrite MCP server for session {session_id}")

    return create_sdk_mcp_server(
        name=server_name,
        version=version,
        tools=tools,
    )
