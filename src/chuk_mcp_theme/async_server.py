#!/usr/bin/env python3
"""
Async Theme MCP Server using chuk-mcp-server

This server provides MCP tools for resolving themed design tokens.
Token sets are YAML files - a built-in library ships with the package and
you can copy any of them into your project to customize.

The server provides tools for:
- Listing and describing token sets
- Resolving tokens for an appearance mode and host capabilities
- Explaining how a single token resolved
- Validating token set definitions
- Exporting CSS custom properties and cascade stylesheets
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_theme.themes import TokenSetLoader
from chuk_mcp_theme.tools import register_theme_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-theme")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
THEMES_DIR = BASE_PATH / "themes"
LIBRARY_PATH = Path(__file__).parent / "themes" / "library"

token_set_loader = TokenSetLoader(
    library_path=LIBRARY_PATH,
    project_path=THEMES_DIR,
)

# Register all tools
theme_tools = register_theme_tools(mcp, token_set_loader)

# Export tool functions for direct access
theme_list_token_sets = theme_tools["theme_list_token_sets"]
theme_describe_token_set = theme_tools["theme_describe_token_set"]
theme_resolve = theme_tools["theme_resolve"]
theme_resolve_all = theme_tools["theme_resolve_all"]
theme_explain_token = theme_tools["theme_explain_token"]
theme_validate_token_set = theme_tools["theme_validate_token_set"]
theme_export_css = theme_tools["theme_export_css"]
theme_compile_stylesheet = theme_tools["theme_compile_stylesheet"]
theme_copy_token_set_to_project = theme_tools["theme_copy_token_set_to_project"]

logger.info("CHUK Theme MCP Server initialized")
logger.info(f"  Library path: {LIBRARY_PATH}")
logger.info(f"  Project themes dir: {THEMES_DIR}")
