"""
Pydantic models for the theme system.

This module provides:
- TokenSet: The closed collection of design tokens
- DesignToken: A named token with guarded candidate values
- CandidateValue / Condition: One guarded value and its predicate
- AmbientState: Appearance mode plus host capabilities
- ResolvedTheme: One value per token for a given ambient state
"""

from chuk_mcp_theme.models.resolved import AmbientState, ResolvedTheme, parse_appearance
from chuk_mcp_theme.models.token import (
    CandidateValue,
    Condition,
    ConfigurationError,
    DesignToken,
    TokenSet,
    TokenSetMetadata,
    normalize_capabilities,
)

__all__ = [
    "AmbientState",
    "CandidateValue",
    "Condition",
    "ConfigurationError",
    "DesignToken",
    "ResolvedTheme",
    "TokenSet",
    "TokenSetMetadata",
    "normalize_capabilities",
    "parse_appearance",
]
