"""
Resolution models - the ambient state going in and the values coming out.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field

from chuk_mcp_theme.constants import AppearanceMode, ErrorMessages
from chuk_mcp_theme.models.token import normalize_capabilities


def parse_appearance(appearance: str | AppearanceMode | None) -> AppearanceMode:
    """Coerce an appearance mode name to the enum; None means unspecified."""
    if appearance is None:
        return AppearanceMode.UNSPECIFIED
    if isinstance(appearance, AppearanceMode):
        return appearance
    if not isinstance(appearance, str):
        raise ValueError(ErrorMessages.INVALID_APPEARANCE.format(appearance=appearance))
    try:
        return AppearanceMode(appearance.strip().lower())
    except ValueError:
        raise ValueError(ErrorMessages.INVALID_APPEARANCE.format(appearance=appearance)) from None


class AmbientState(BaseModel):
    """
    The host signals a resolution depends on.

    Supplied by the host on every call; never stored by the resolver
    except as a memo key.
    """

    appearance: AppearanceMode = Field(default=AppearanceMode.UNSPECIFIED)
    capabilities: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @classmethod
    def from_inputs(
        cls,
        appearance: str | AppearanceMode | None = None,
        capabilities: Iterable[str | Enum] | str | None = None,
    ) -> AmbientState:
        """Build a state from loosely typed caller input."""
        return cls(
            appearance=parse_appearance(appearance),
            capabilities=normalize_capabilities(capabilities),
        )

    @property
    def key(self) -> tuple[str, frozenset[str]]:
        """Hashable memo key."""
        return (self.appearance.value, self.capabilities)


class ResolvedTheme(BaseModel):
    """
    The outcome of one resolution: exactly one value per token.

    values and sources are keyed by token name in declaration order;
    sources records the priority of the candidate that won.
    """

    token_set: str
    appearance: AppearanceMode
    capabilities: list[str] = Field(default_factory=list)
    values: dict[str, str] = Field(default_factory=dict)
    sources: dict[str, int] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)

    def as_dict(self) -> dict[str, str]:
        """Plain token name to value mapping (a fresh copy)."""
        return dict(self.values)
