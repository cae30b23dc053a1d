"""fsgate - sandboxed filesystem access over MCP."""

__version__ = "0.1.0"
