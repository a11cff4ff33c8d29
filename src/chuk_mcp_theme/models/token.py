"""
Token models - named design tokens with guarded candidate values.

A token never holds a value directly. It holds candidates, each guarded by
a condition over the ambient state (appearance mode and host capabilities)
and ranked by an explicit priority. Resolution picks the highest-priority
candidate whose condition holds.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, field_validator

from chuk_mcp_theme.constants import TOKEN_SET_SCHEMA, AppearanceMode, TokenKind

if TYPE_CHECKING:
    from collections.abc import Sequence

_TOKEN_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")


class ConfigurationError(ValueError):
    """
    Raised when a token set cannot be used for resolution.

    This is a configuration defect, not a runtime condition: it is raised
    when a resolver is constructed or a token set file is loaded, never
    while resolving.
    """

    def __init__(self, message: str, issues: Sequence[Any] = ()):
        super().__init__(message)
        self.issues = list(issues)


def normalize_capabilities(capabilities: Iterable[str | Enum] | str | None) -> frozenset[str]:
    """Normalize capability flags (enum members or names) to a set of names."""
    if capabilities is None:
        return frozenset()
    if isinstance(capabilities, (str, Enum)):
        capabilities = [capabilities]

    names: set[str] = set()
    for capability in capabilities:
        name = capability.value if isinstance(capability, Enum) else str(capability)
        name = name.strip()
        if not name:
            raise ValueError("Capability names must be non-empty")
        names.add(name)
    return frozenset(names)


class Condition(BaseModel):
    """
    Predicate guarding a candidate value.

    Holds when the appearance (if set) equals the ambient appearance and
    every required capability is supported by the host. A condition with
    neither is unconditional.
    """

    appearance: AppearanceMode | None = Field(
        default=None,
        description="Appearance mode this candidate applies to",
    )
    capabilities: frozenset[str] = Field(
        default_factory=frozenset,
        description="Host capabilities that must all be present",
    )

    model_config = {"frozen": True}

    @field_validator("capabilities", mode="before")
    @classmethod
    def validate_capabilities(cls, v: Any) -> frozenset[str]:
        """Accept a single name, a list of names, or Capability members."""
        return normalize_capabilities(v)

    @property
    def is_unconditional(self) -> bool:
        """True if the condition always holds."""
        return self.appearance is None and not self.capabilities

    def matches(self, appearance: AppearanceMode, capabilities: frozenset[str]) -> bool:
        """Check the condition against an ambient state."""
        if self.appearance is not None and self.appearance != appearance:
            return False
        return self.capabilities <= capabilities

    def describe(self) -> str:
        """Human readable form, e.g. 'appearance=dark, requires inset-env'."""
        if self.is_unconditional:
            return "always"
        parts = []
        if self.appearance is not None:
            parts.append(f"appearance={self.appearance.value}")
        if self.capabilities:
            parts.append(f"requires {', '.join(sorted(self.capabilities))}")
        return ", ".join(parts)

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-serializable dictionary."""
        data: dict[str, Any] = {}
        if self.appearance is not None:
            data["appearance"] = self.appearance.value
        if self.capabilities:
            data["capabilities"] = sorted(self.capabilities)
        return data


class CandidateValue(BaseModel):
    """One possible value of a token, guarded by a condition."""

    priority: int = Field(..., ge=0, description="Higher priority is evaluated first")
    when: Condition = Field(default_factory=Condition, description="Guarding condition")
    value: str = Field(..., description="Concrete value, e.g. '8px' or 'rgb(84,0,215)'")

    model_config = {"frozen": True}

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Values are non-empty single-line strings."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Candidate value must be a non-empty string")
        if any(ch in cleaned for ch in ("\n", "\r", ";", "{", "}")):
            raise ValueError(f"Candidate value must be a single CSS value: {v!r}")
        return cleaned

    @property
    def is_fallback(self) -> bool:
        """True if this candidate always applies."""
        return self.when.is_unconditional


class DesignToken(BaseModel):
    """
    A named design token.

    Tokens resolve to exactly one of their candidates. A well-formed token
    declares exactly one unconditional fallback, ranked below every other
    candidate, so it always resolves.
    """

    name: str = Field(..., description="Token name (kebab-case, e.g. 'accent-color')")
    kind: TokenKind = Field(default=TokenKind.OTHER, description="Kind of value")
    description: str = Field("", description="What the token is used for")
    candidates: list[CandidateValue] = Field(
        default_factory=list,
        description="Candidate values with distinct priorities",
    )

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Token names are lowercase kebab-case identifiers."""
        if not _TOKEN_NAME_RE.match(v):
            raise ValueError(f"Invalid token name: {v!r}")
        return v

    def ordered_candidates(self) -> list[CandidateValue]:
        """Candidates in evaluation order (highest priority first)."""
        return sorted(self.candidates, key=lambda c: c.priority, reverse=True)

    @property
    def fallback(self) -> CandidateValue | None:
        """The lowest-priority unconditional candidate, if any."""
        for candidate in reversed(self.ordered_candidates()):
            if candidate.is_fallback:
                return candidate
        return None

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-serializable dictionary (without the name key)."""
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.description:
            data["description"] = self.description
        candidates = []
        for candidate in self.ordered_candidates():
            entry: dict[str, Any] = {"priority": candidate.priority}
            when = candidate.when.to_yaml_dict()
            if when:
                entry["when"] = when
            entry["value"] = candidate.value
            candidates.append(entry)
        data["candidates"] = candidates
        return data


class TokenSet(BaseModel):
    """
    The closed set of design tokens resolved together.

    Structural checks (fallbacks, distinct priorities) are done by the
    validator when a resolver is built, so a malformed set can still be
    loaded and reported on.
    """

    schema_version: str = Field(TOKEN_SET_SCHEMA, alias="schema")
    name: str = Field(..., description="Token set name")
    description: str = Field("", description="Token set description")
    tokens: list[DesignToken] = Field(default_factory=list, description="Design tokens")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("schema_version")
    @classmethod
    def validate_schema(cls, v: str) -> str:
        """Only token-set/v1 is understood."""
        if v != TOKEN_SET_SCHEMA:
            raise ValueError(f"Unsupported schema {v!r}; expected {TOKEN_SET_SCHEMA!r}")
        return v

    def token_names(self) -> list[str]:
        """Token names in declaration order."""
        return [token.name for token in self.tokens]

    def get_token(self, name: str) -> DesignToken | None:
        """Get a token by name."""
        for token in self.tokens:
            if token.name == name:
                return token
        return None

    def referenced_capabilities(self) -> list[str]:
        """All capability names used by any candidate, sorted."""
        names: set[str] = set()
        for token in self.tokens:
            for candidate in token.candidates:
                names |= candidate.when.capabilities
        return sorted(names)

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-serializable dictionary."""
        return {
            "schema": self.schema_version,
            "name": self.name,
            "description": self.description,
            "tokens": {token.name: token.to_yaml_dict() for token in self.tokens},
        }


class TokenSetMetadata(BaseModel):
    """Lightweight metadata for listing token sets."""

    name: str
    description: str
    token_count: int
    capabilities: list[str]

    model_config = {"frozen": True}

    @classmethod
    def from_token_set(cls, token_set: TokenSet) -> TokenSetMetadata:
        """Create metadata from a token set."""
        return cls(
            name=token_set.name,
            description=token_set.description,
            token_count=len(token_set.tokens),
            capabilities=token_set.referenced_capabilities(),
        )
