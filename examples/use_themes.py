#!/usr/bin/env python3
"""
Example: Using the Token Resolver.

This demonstrates how a token set resolves to different values depending
on the reader's light/dark preference and what the host device supports,
and how the same token set compiles to a stylesheet that lets the browser
make that choice itself.

Usage:
    python examples/use_themes.py
"""

import tempfile
from pathlib import Path

from chuk_mcp_theme.compiler import compile_stylesheet, render_custom_properties
from chuk_mcp_theme.constants import AppearanceMode, Capability
from chuk_mcp_theme.themes import TokenResolver, TokenSetLoader, TokenSetValidator


def main() -> None:
    """Demonstrate the token resolver."""
    print("CHUK Theme Token Resolver Demo")
    print("=" * 40)
    print()

    library_path = Path(__file__).parent.parent / "src/chuk_mcp_theme/themes/library"

    with tempfile.TemporaryDirectory() as tmp:
        loader = TokenSetLoader(library_path=library_path, project_path=Path(tmp))

        # List available token sets
        print("Available token sets:")
        for meta in loader.list_token_sets():
            print(f"  {meta.name}: {meta.description[:50]}...")
            print(f"    Tokens: {meta.token_count}, Capabilities: {', '.join(meta.capabilities)}")
        print()

        token_set = loader.get_token_set("blog")
        if not token_set:
            print("Failed to load token set")
            return

        result = TokenSetValidator().validate(token_set)
        print(f"Using token set: {token_set.name}")
        print(f"  {result}")
        print()

        resolver = TokenResolver(token_set)

        # Same token, different ambient states
        print("accent-color by appearance:")
        for mode in AppearanceMode:
            resolved = resolver.resolve(mode)
            print(f"  {mode.value:<12} {resolved['accent-color']}")
        print()

        print("safe-area-inset-top by host capabilities:")
        for caps in ([], [Capability.INSET_CONSTANT], [Capability.INSET_ENV, Capability.INSET_CONSTANT]):
            resolved = resolver.resolve(capabilities=caps)
            label = ", ".join(resolved.capabilities) or "none"
            print(f"  {label:<28} {resolved['safe-area-inset-top']}")
        print()

        # Why did a token resolve that way?
        print("Explaining safe-area-inset-top with only inset-constant:")
        for step in resolver.explain("safe-area-inset-top", capabilities=["inset-constant"]):
            marker = "->" if step.selected else "  "
            status = "matched" if step.matched else "skipped"
            print(f"  {marker} p{step.priority} {step.condition:<24} {status:<8} {step.value}")
        print()

        # One state as custom properties
        print("Dark mode on a notched phone:")
        print(render_custom_properties(resolver.resolve("dark", ["inset-env"])))

        # The whole set as a cascade
        print("Compiled stylesheet:")
        print(compile_stylesheet(token_set))

        # Copying token sets for customization
        print("Copying token set to project for customization:")
        copied_path = loader.copy_to_project("blog")
        if copied_path:
            print(f"  Copied to: {copied_path}")
            print("  You can now edit this file to customize the token set!")
        print()

        print("Done! Point your MCP client at chuk-mcp-theme to resolve tokens.")


if __name__ == "__main__":
    main()
