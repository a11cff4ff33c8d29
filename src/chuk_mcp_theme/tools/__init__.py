"""
MCP tool implementations.

Tools are organized by domain:
- themes - Token set discovery, resolution, validation and CSS export
"""

from chuk_mcp_theme.tools.themes import register_theme_tools

__all__ = [
    "register_theme_tools",
]
