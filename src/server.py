"""
fsgate server assembly.

create_fsgate_server() binds a validated configuration to a session: it
installs the session's PathResolver and builds the MCP server holding the
permitted tools. The same server config can be handed to an in-process
agent (ClaudeAgentOptions.mcp_servers) or served over stdio with
run_stdio_server().
"""
import logging
from typing import Any

from mcp.server.stdio import stdio_server

from tools.fsgate import SERVER_NAME, create_fsgate_tools_mcp_server

from . import __version__
from .config import FsGateConfig
from .core.path_resolver import cleanup_path_resolver, configure_path_resolver

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID: str = "stdio"


def create_fsgate_server(config: FsGateConfig, session_id: str = DEFAULT_SESSION_ID) -> Any:
    """
    Configure the session's resolver and build its MCP server.

    Args:
        config: Configuration whose roots are already canonical
            (FsGateConfig.validated())
        session_id: Session the tools are bound to

    Returns:
        McpSdkServerConfig; its "instance" is the underlying mcp Server.
    """
    configure_path_resolver(
        session_id,
        config.allowed_directories,
        max_depth=config.max_depth,
    )
    return create_fsgate_tools_mcp_server(
        session_id=session_id,
        max_read_size=config.max_read_size,
        allow_write=config.writes_enabled,
        allow_destructive=config.allow_destructive,
        server_name=SERVER_NAME,
        version=__version__,
    )


async def run_stdio_server(config: FsGateConfig, session_id: str = DEFAULT_SESSION_ID) -> None:
    """Serve the fsgate tools over stdin/stdout until the client disconnects."""
    server = create_fsgate_server(config, session_id)["instance"]

    logger.info(
        f"fsgate {__version__} serving {len(config.allowed_directories)} "
        f"director{'y' if len(config.allowed_directories) == 1 else 'ies'} over stdio"
    )
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        cleanup_path_resolver(session_id)
        logger.info("fsgate stdio server stopped")
