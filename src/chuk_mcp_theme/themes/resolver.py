"""
Token resolver - resolves design tokens against the ambient state.

The resolver translates a token set plus the host's signals (appearance
mode, capabilities) into one concrete value per token. Each token's
candidates are tried in descending priority and the first whose condition
holds wins. Declaration order plays no part.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from itertools import combinations

from chuk_mcp_theme.constants import AppearanceMode, ErrorMessages
from chuk_mcp_theme.models.resolved import AmbientState, ResolvedTheme
from chuk_mcp_theme.models.token import CandidateValue, ConfigurationError, TokenSet
from chuk_mcp_theme.themes.validator import TokenSetValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateEvaluation:
    """How one candidate fared in a resolution."""

    priority: int
    value: str
    condition: str
    matched: bool
    selected: bool


class TokenResolver:
    """
    Resolves a token set for a given ambient state.

    The resolver:
    - Rejects malformed token sets at construction (ConfigurationError)
    - Resolves every token to exactly one value
    - Memoizes results per (appearance, capabilities)
    - Explains why a token resolved the way it did
    """

    def __init__(self, token_set: TokenSet):
        """
        Initialize the resolver with a token set.

        Args:
            token_set: The token set to resolve

        Raises:
            ConfigurationError: If the token set is empty, a token lacks an
                unconditional fallback, or priorities collide
        """
        result = TokenSetValidator().validate(token_set)
        if not result.is_valid:
            details = "; ".join(issue.message for issue in result.errors)
            raise ConfigurationError(
                ErrorMessages.INVALID_TOKEN_SET.format(name=token_set.name, reason=details),
                result.errors,
            )

        self.token_set = token_set
        self._ordered: dict[str, list[CandidateValue]] = {
            token.name: token.ordered_candidates() for token in token_set.tokens
        }
        self._cache: dict[tuple[str, frozenset[str]], tuple[dict[str, str], dict[str, int]]] = {}

    def resolve(
        self,
        appearance: str | AppearanceMode | None = AppearanceMode.UNSPECIFIED,
        capabilities: Iterable[str | Enum] | str | None = None,
    ) -> ResolvedTheme:
        """
        Resolve every token for an ambient state.

        Args:
            appearance: Appearance mode (enum or name); None means unspecified
            capabilities: Capabilities the host supports (may be empty)

        Returns:
            A fresh ResolvedTheme covering every token in the set

        Raises:
            ValueError: If the appearance mode is not recognized
        """
        state = AmbientState.from_inputs(appearance, capabilities)

        cached = self._cache.get(state.key)
        if cached is None:
            logger.debug(
                f"Resolving '{self.token_set.name}' for {state.appearance.value} "
                f"with capabilities {sorted(state.capabilities)}"
            )
            cached = self._compute(state)
            self._cache[state.key] = cached
        values, sources = cached

        return ResolvedTheme(
            token_set=self.token_set.name,
            appearance=state.appearance,
            capabilities=sorted(state.capabilities),
            values=dict(values),
            sources=dict(sources),
        )

    def resolve_all(self) -> list[ResolvedTheme]:
        """
        Resolve every reachable ambient state.

        Covers all appearance modes combined with every subset of the
        capabilities the token set references.
        """
        capabilities = self.token_set.referenced_capabilities()
        subsets = [
            combo
            for size in range(len(capabilities) + 1)
            for combo in combinations(capabilities, size)
        ]
        return [
            self.resolve(appearance, subset) for appearance in AppearanceMode for subset in subsets
        ]

    def explain(
        self,
        token_name: str,
        appearance: str | AppearanceMode | None = AppearanceMode.UNSPECIFIED,
        capabilities: Iterable[str | Enum] | str | None = None,
    ) -> list[CandidateEvaluation]:
        """
        Trace how a single token resolves.

        Args:
            token_name: Token to explain
            appearance: Appearance mode
            capabilities: Capabilities the host supports

        Returns:
            Candidates in evaluation order, with exactly one selected

        Raises:
            KeyError: If the token is not in the set
        """
        if token_name not in self._ordered:
            raise KeyError(token_name)
        state = AmbientState.from_inputs(appearance, capabilities)

        trace: list[CandidateEvaluation] = []
        selected = False
        for candidate in self._ordered[token_name]:
            matched = candidate.when.matches(state.appearance, state.capabilities)
            trace.append(
                CandidateEvaluation(
                    priority=candidate.priority,
                    value=candidate.value,
                    condition=candidate.when.describe(),
                    matched=matched,
                    selected=matched and not selected,
                )
            )
            selected = selected or matched
        return trace

    def clear_cache(self) -> None:
        """Drop memoized resolutions."""
        self._cache.clear()

    def _compute(self, state: AmbientState) -> tuple[dict[str, str], dict[str, int]]:
        values: dict[str, str] = {}
        sources: dict[str, int] = {}
        for name, candidates in self._ordered.items():
            # Construction guarantees an unconditional candidate, so this always hits
            winner = next(
                c for c in candidates if c.when.matches(state.appearance, state.capabilities)
            )
            values[name] = winner.value
            sources[name] = winner.priority
        return values, sources


def resolve(
    token_set: TokenSet,
    appearance: str | AppearanceMode | None = AppearanceMode.UNSPECIFIED,
    capabilities: Iterable[str | Enum] | str | None = None,
) -> dict[str, str]:
    """
    Resolve a token set in one call.

    Convenience wrapper around TokenResolver for callers that resolve once.
    """
    return TokenResolver(token_set).resolve(appearance, capabilities).as_dict()
