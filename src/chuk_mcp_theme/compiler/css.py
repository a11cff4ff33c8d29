"""
CSS export - the end of the pipeline.

Turns resolved tokens into CSS custom properties, and compiles a whole
token set back into a cascade whose effective precedence matches the
resolver's. All operations are deterministic: same input → same output.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from chuk_mcp_theme.constants import SUPPORTS_QUERIES, AppearanceMode
from chuk_mcp_theme.themes.resolver import TokenResolver

if TYPE_CHECKING:
    from chuk_mcp_theme.models.resolved import ResolvedTheme
    from chuk_mcp_theme.models.token import Condition, TokenSet

INDENT = "  "

# Appearance modes a media query can express
MEDIA_QUERIES: dict[AppearanceMode, str] = {
    AppearanceMode.LIGHT: "(prefers-color-scheme: light)",
    AppearanceMode.DARK: "(prefers-color-scheme: dark)",
}


def custom_property(name: str, prefix: str = "") -> str:
    """CSS custom property name for a token, e.g. '--accent-color'."""
    return f"--{prefix}{name}"


def render_custom_properties(
    resolved: ResolvedTheme,
    selector: str = ":root",
    prefix: str = "",
) -> str:
    """
    Render resolved tokens as a block of CSS custom properties.

    Args:
        resolved: Output of TokenResolver.resolve
        selector: Selector the properties are declared on
        prefix: Optional prefix for property names

    Returns:
        CSS text, e.g. ':root {\\n  --accent-color: rgb(84,0,215);\\n}\\n'
    """
    declarations = [
        (custom_property(name, prefix), value) for name, value in resolved.values.items()
    ]
    return "\n".join(_rule(selector, declarations, depth=0)) + "\n"


def compile_stylesheet(
    token_set: TokenSet,
    selector: str = ":root",
    prefix: str = "",
) -> str:
    """
    Compile a token set into a stylesheet using the native cascade.

    Fallbacks go first; each further candidate lands in a block after every
    lower-priority candidate of the same token, wrapped in @media for
    appearance conditions and @supports for capabilities. Capabilities with
    no @supports probe are listed in a comment instead.

    Args:
        token_set: Token set to compile

    Returns:
        CSS text

    Raises:
        ConfigurationError: If the token set is not resolvable
    """
    # Validation guarantees one fallback per token, ranked below every other candidate
    TokenResolver(token_set)

    blocks: dict[tuple[int, str, tuple[str, ...]], list[tuple[str, str]]] = defaultdict(list)
    conditions: dict[tuple[int, str, tuple[str, ...]], Condition] = {}
    skipped: list[str] = []

    for token in token_set.tokens:
        for layer, candidate in enumerate(reversed(token.ordered_candidates())):
            prop = custom_property(token.name, prefix)
            if not _expressible(candidate.when):
                skipped.append(f"{prop}: {candidate.value} ({candidate.when.describe()})")
                continue
            appearance = candidate.when.appearance.value if candidate.when.appearance else ""
            key = (layer, appearance, tuple(sorted(candidate.when.capabilities)))
            blocks[key].append((prop, candidate.value))
            conditions[key] = candidate.when

    lines: list[str] = [f"/* Token set: {token_set.name} */"]
    if skipped:
        lines.append("/* Not expressible in CSS:")
        lines.extend(f"{INDENT}{entry}" for entry in skipped)
        lines.append("*/")

    for key in sorted(blocks):
        lines.append("")
        lines.extend(_conditional_rule(conditions[key], selector, blocks[key]))

    return "\n".join(lines) + "\n"


def _expressible(condition: Condition) -> bool:
    return all(capability in SUPPORTS_QUERIES for capability in condition.capabilities)


def _conditional_rule(
    condition: Condition,
    selector: str,
    declarations: list[tuple[str, str]],
) -> list[str]:
    wrappers: list[str] = []
    if condition.appearance is not None:
        wrappers.append(f"@media {MEDIA_QUERIES[condition.appearance]}")
    if condition.capabilities:
        queries = " and ".join(SUPPORTS_QUERIES[c] for c in sorted(condition.capabilities))
        wrappers.append(f"@supports {queries}")

    lines: list[str] = []
    for depth, wrapper in enumerate(wrappers):
        lines.append(f"{INDENT * depth}{wrapper} {{")
    lines.extend(_rule(selector, declarations, depth=len(wrappers)))
    for depth in reversed(range(len(wrappers))):
        lines.append(f"{INDENT * depth}}}")
    return lines


def _rule(selector: str, declarations: list[tuple[str, str]], depth: int) -> list[str]:
    pad = INDENT * depth
    lines = [f"{pad}{selector} {{"]
    lines.extend(f"{pad}{INDENT}{prop}: {value};" for prop, value in declarations)
    lines.append(f"{pad}}}")
    return lines
