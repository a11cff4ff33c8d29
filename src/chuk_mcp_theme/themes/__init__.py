"""
Theme system - design tokens resolved against the host's ambient state.

Tokens don't hold fixed values, they hold guarded candidates.
The appearance mode and host capabilities decide which one applies.
"""

from chuk_mcp_theme.themes.loader import TokenSetLoader
from chuk_mcp_theme.themes.resolver import CandidateEvaluation, TokenResolver, resolve
from chuk_mcp_theme.themes.validator import (
    TokenSetValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
)

__all__ = [
    "CandidateEvaluation",
    "TokenResolver",
    "TokenSetLoader",
    "TokenSetValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "resolve",
]
