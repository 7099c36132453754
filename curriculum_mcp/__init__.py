"""Curriculum MCP server - curriculum plan and app documentation over MCP."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("curriculum-mcp")
except PackageNotFoundError:
    __version__ = "0+unknown"
