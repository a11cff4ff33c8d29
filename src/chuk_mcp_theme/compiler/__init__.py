"""
Compiler - emits resolved tokens for the rendering layer.

Two outputs:
- render_custom_properties: one resolved state as CSS custom properties
- compile_stylesheet: a whole token set as a cascade stylesheet
"""

from chuk_mcp_theme.compiler.css import (
    compile_stylesheet,
    custom_property,
    render_custom_properties,
)

__all__ = [
    "compile_stylesheet",
    "custom_property",
    "render_custom_properties",
]
