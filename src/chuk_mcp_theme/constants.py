"""
Constants and enums for the theme system.

No magic strings - use enums and Literal types for constrained values.
"""

from enum import Enum
from typing import Literal


class AppearanceMode(str, Enum):
    """
    Ambient light/dark preference reported by the host.

    UNSPECIFIED covers hosts that cannot or will not report a preference.
    """

    LIGHT = "light"
    DARK = "dark"
    UNSPECIFIED = "unspecified"


class Capability(str, Enum):
    """
    Well-known host capabilities.

    Token sets may reference other capability names; these are the ones
    the CSS compiler knows how to turn into @supports queries.
    """

    INSET_ENV = "inset-env"  # env(safe-area-inset-*)
    INSET_CONSTANT = "inset-constant"  # constant(safe-area-inset-*), iOS 11.0


class TokenKind(str, Enum):
    """What kind of value a token carries."""

    COLOR = "color"
    LENGTH = "length"
    FONT = "font"
    OTHER = "other"


# Schema versions - frozen for v1
SchemaVersion = Literal["token-set/v1"]

TOKEN_SET_SCHEMA: SchemaVersion = "token-set/v1"

# @supports probes for the well-known capabilities
SUPPORTS_QUERIES: dict[str, str] = {
    Capability.INSET_ENV.value: "(top: env(safe-area-inset-top))",
    Capability.INSET_CONSTANT.value: "(top: constant(safe-area-inset-top))",
}


class ErrorMessages:
    """Standardized error messages."""

    TOKEN_SET_NOT_FOUND = "Token set '{name}' not found."
    TOKEN_NOT_FOUND = "Token '{token}' not found in token set '{name}'."
    INVALID_APPEARANCE = "Invalid appearance mode: '{appearance}'. Expected light, dark or unspecified."
    INVALID_TOKEN_SET = "Token set '{name}' is invalid: {reason}"


class SuccessMessages:
    """Standardized success messages."""

    TOKEN_SET_COPIED = "Copied token set '{name}' to {path}."
