"""
CHUK Theme - themed design tokens resolved against the host's ambient state.
"""

from chuk_mcp_theme.constants import AppearanceMode, Capability, TokenKind
from chuk_mcp_theme.models import ConfigurationError, ResolvedTheme, TokenSet
from chuk_mcp_theme.themes import TokenResolver, TokenSetLoader, resolve

__version__ = "0.1.0"

__all__ = [
    "AppearanceMode",
    "Capability",
    "ConfigurationError",
    "ResolvedTheme",
    "TokenKind",
    "TokenResolver",
    "TokenSet",
    "TokenSetLoader",
    "resolve",
]
