"""MCP server package for elmfmt."""

from elmfmt.server.main import get_registered_mcp_tools, mcp, run_server

__all__ = ["get_registered_mcp_tools", "mcp", "run_server"]
