"""
Theme tools - MCP tools for token set discovery, resolution and export.

Tools for listing token sets, resolving them for an ambient state,
explaining individual tokens, validating definitions and exporting CSS.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_theme.compiler import compile_stylesheet, render_custom_properties
from chuk_mcp_theme.constants import ErrorMessages, SuccessMessages
from chuk_mcp_theme.themes import TokenSetLoader, TokenSetValidator

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _not_found(name: str) -> str:
    return json.dumps(
        {"status": "error", "message": ErrorMessages.TOKEN_SET_NOT_FOUND.format(name=name)}
    )


def register_theme_tools(
    mcp: ChukMCPServer,
    loader: TokenSetLoader,
) -> dict[str, Any]:
    """
    Register theme tools with the MCP server.

    Args:
        mcp: The MCP server instance
        loader: The token set loader

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def theme_list_token_sets() -> str:
        """
        List available token sets.

        Returns all token sets from the library and project with
        basic metadata.

        Returns:
            JSON string with list of token set summaries

        Example:
            theme_list_token_sets()
        """
        try:
            token_sets = loader.list_token_sets()

            return json.dumps(
                {
                    "status": "success",
                    "token_sets": [
                        {
                            "name": meta.name,
                            "description": meta.description,
                            "token_count": meta.token_count,
                            "capabilities": meta.capabilities,
                        }
                        for meta in token_sets
                    ],
                    "count": len(token_sets),
                }
            )
        except Exception as e:
            logger.exception("Failed to list token sets")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_list_token_sets"] = theme_list_token_sets

    @mcp.tool  # type: ignore[arg-type]
    async def theme_describe_token_set(name: str) -> str:
        """
        Get the full definition of a token set.

        Returns every token with its candidates in evaluation order.

        Args:
            name: Token set name

        Returns:
            JSON string with token set details

        Example:
            theme_describe_token_set(name="blog")
        """
        try:
            token_set = loader.get_token_set(name)
            if token_set is None:
                return _not_found(name)

            return json.dumps(
                {
                    "status": "success",
                    "token_set": {
                        "name": token_set.name,
                        "description": token_set.description,
                        "capabilities": token_set.referenced_capabilities(),
                        "tokens": [
                            {
                                "name": token.name,
                                "kind": token.kind.value,
                                "description": token.description,
                                "candidates": [
                                    {
                                        "priority": c.priority,
                                        "when": c.when.describe(),
                                        "value": c.value,
                                    }
                                    for c in token.ordered_candidates()
                                ],
                            }
                            for token in token_set.tokens
                        ],
                    },
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to describe token set")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_describe_token_set"] = theme_describe_token_set

    @mcp.tool  # type: ignore[arg-type]
    async def theme_resolve(
        name: str,
        appearance: str = "unspecified",
        capabilities: list[str] | None = None,
    ) -> str:
        """
        Resolve a token set for an appearance mode and host capabilities.

        Every token resolves to exactly one value.

        Args:
            name: Token set name
            appearance: 'light', 'dark' or 'unspecified'
            capabilities: Host capabilities, e.g. ['inset-env']

        Returns:
            JSON string with token values and the priority that won each

        Example:
            theme_resolve(name="blog", appearance="dark", capabilities=["inset-env"])
        """
        try:
            resolver = loader.get_resolver(name)
            if resolver is None:
                return _not_found(name)

            resolved = resolver.resolve(appearance, capabilities)

            return json.dumps(
                {
                    "status": "success",
                    "token_set": resolved.token_set,
                    "appearance": resolved.appearance.value,
                    "capabilities": resolved.capabilities,
                    "values": resolved.values,
                    "sources": resolved.sources,
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to resolve token set")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_resolve"] = theme_resolve

    @mcp.tool  # type: ignore[arg-type]
    async def theme_resolve_all(name: str) -> str:
        """
        Resolve a token set for every reachable ambient state.

        Covers every appearance mode combined with every subset of the
        capabilities the token set uses.

        Args:
            name: Token set name

        Returns:
            JSON string with one entry per ambient state

        Example:
            theme_resolve_all(name="blog")
        """
        try:
            resolver = loader.get_resolver(name)
            if resolver is None:
                return _not_found(name)

            states = resolver.resolve_all()

            return json.dumps(
                {
                    "status": "success",
                    "token_set": resolver.token_set.name,
                    "states": [
                        {
                            "appearance": r.appearance.value,
                            "capabilities": r.capabilities,
                            "values": r.values,
                        }
                        for r in states
                    ],
                    "count": len(states),
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to resolve all states")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_resolve_all"] = theme_resolve_all

    @mcp.tool  # type: ignore[arg-type]
    async def theme_explain_token(
        name: str,
        token: str,
        appearance: str = "unspecified",
        capabilities: list[str] | None = None,
    ) -> str:
        """
        Explain how one token resolves.

        Lists candidates in evaluation order, whether each matched,
        and which one was selected.

        Args:
            name: Token set name
            token: Token name
            appearance: 'light', 'dark' or 'unspecified'
            capabilities: Host capabilities

        Returns:
            JSON string with the evaluation trace

        Example:
            theme_explain_token(name="blog", token="safe-area-inset-top", capabilities=["inset-constant"])
        """
        try:
            resolver = loader.get_resolver(name)
            if resolver is None:
                return _not_found(name)

            trace = resolver.explain(token, appearance, capabilities)
            selected = next(step for step in trace if step.selected)

            return json.dumps(
                {
                    "status": "success",
                    "token": token,
                    "value": selected.value,
                    "trace": [
                        {
                            "priority": step.priority,
                            "value": step.value,
                            "when": step.condition,
                            "matched": step.matched,
                            "selected": step.selected,
                        }
                        for step in trace
                    ],
                }
            )
        except KeyError:
            return json.dumps(
                {
                    "status": "error",
                    "message": ErrorMessages.TOKEN_NOT_FOUND.format(token=token, name=name),
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to explain token")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_explain_token"] = theme_explain_token

    @mcp.tool  # type: ignore[arg-type]
    async def theme_validate_token_set(name: str) -> str:
        """
        Validate a token set definition.

        Reports errors (the set cannot be resolved) and warnings
        (it resolves, but probably not as intended).

        Args:
            name: Token set name

        Returns:
            JSON string with validation results

        Example:
            theme_validate_token_set(name="blog")
        """
        try:
            token_set = loader.get_token_set(name, validate=False)
            if token_set is None:
                return _not_found(name)

            result = TokenSetValidator().validate(token_set)

            return json.dumps(
                {
                    "status": "success",
                    "valid": result.is_valid,
                    "errors": [
                        {"code": i.code, "message": i.message, "location": i.location}
                        for i in result.errors
                    ],
                    "warnings": [
                        {"code": i.code, "message": i.message, "location": i.location}
                        for i in result.warnings
                    ],
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to validate token set")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_validate_token_set"] = theme_validate_token_set

    @mcp.tool  # type: ignore[arg-type]
    async def theme_export_css(
        name: str,
        appearance: str = "unspecified",
        capabilities: list[str] | None = None,
        selector: str = ":root",
    ) -> str:
        """
        Export resolved tokens as CSS custom properties.

        Args:
            name: Token set name
            appearance: 'light', 'dark' or 'unspecified'
            capabilities: Host capabilities
            selector: Selector to declare the properties on

        Returns:
            JSON string with the CSS text

        Example:
            theme_export_css(name="blog", appearance="dark")
        """
        try:
            resolver = loader.get_resolver(name)
            if resolver is None:
                return _not_found(name)

            resolved = resolver.resolve(appearance, capabilities)

            return json.dumps(
                {
                    "status": "success",
                    "css": render_custom_properties(resolved, selector=selector),
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to export CSS")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_export_css"] = theme_export_css

    @mcp.tool  # type: ignore[arg-type]
    async def theme_compile_stylesheet(name: str, selector: str = ":root") -> str:
        """
        Compile a token set into a stylesheet using media and feature queries.

        The browser's cascade then picks the same values the resolver would.

        Args:
            name: Token set name
            selector: Selector to declare the properties on

        Returns:
            JSON string with the CSS text

        Example:
            theme_compile_stylesheet(name="blog")
        """
        try:
            token_set = loader.get_token_set(name)
            if token_set is None:
                return _not_found(name)

            return json.dumps(
                {
                    "status": "success",
                    "css": compile_stylesheet(token_set, selector=selector),
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to compile stylesheet")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_compile_stylesheet"] = theme_compile_stylesheet

    @mcp.tool  # type: ignore[arg-type]
    async def theme_copy_token_set_to_project(name: str) -> str:
        """
        Copy a library token set to the project for customization.

        Args:
            name: Token set name

        Returns:
            JSON string with path to copied token set

        Example:
            theme_copy_token_set_to_project(name="blog")
        """
        try:
            path = loader.copy_to_project(name)
            if path is None:
                return _not_found(name)

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.TOKEN_SET_COPIED.format(name=name, path=path),
                    "path": str(path),
                    "hint": "You can now customize this token set by editing the YAML file",
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to copy token set")
            return json.dumps({"status": "error", "message": str(e)})

    tools["theme_copy_token_set_to_project"] = theme_copy_token_set_to_project

    return tools
