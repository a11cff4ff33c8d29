"""
Token Set Validator - validates token set structure and values.

Validates:
- The set has tokens and token names are unique
- Every token has exactly one unconditional fallback, ranked lowest (totality)
- Candidate priorities are distinct per token
- No candidate is guarded by the unspecified appearance
- Values look like their token kind (warning)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from chuk_mcp_theme.constants import AppearanceMode, TokenKind
from chuk_mcp_theme.models.token import DesignToken, TokenSet

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_COLOR_RE = re.compile(r"^(?:rgb|rgba|hsl|hsla)\([^)]+\)$", re.IGNORECASE)
_KEYWORD_RE = re.compile(r"^[a-zA-Z]+$")
_LENGTH_RE = re.compile(r"^-?(?:\d+|\d*\.\d+)(?:px|rem|em|%|vh|vw|vmin|vmax|ch|ex|pt)$")
_CSS_FUNC_RE = re.compile(r"^(?:var|env|constant|calc|min|max|clamp)\(.+\)$", re.IGNORECASE)


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Token set cannot be resolved
    WARNING = "warning"  # Resolves, but probably not as intended


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    code: str
    message: str
    location: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ValidationResult:
    """Result of validating a token set."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add_error(self, code: str, message: str, location: str | None = None) -> None:
        """Add an error issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.ERROR, code, message, location))

    def add_warning(self, code: str, message: str, location: str | None = None) -> None:
        """Add a warning issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.WARNING, code, message, location))

    @property
    def is_valid(self) -> bool:
        """Return True if no errors (warnings are OK)."""
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get all error issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get all warning issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def codes(self) -> list[str]:
        """Issue codes in the order they were found."""
        return [i.code for i in self.issues]

    def __bool__(self) -> bool:
        """Boolean conversion returns is_valid."""
        return self.is_valid

    def __str__(self) -> str:
        if not self.issues:
            return "Validation passed: no issues found"
        return "\n".join(str(issue) for issue in self.issues)


def looks_like(kind: TokenKind, value: str) -> bool:
    """Loose syntactic check of a value against its token kind."""
    if _CSS_FUNC_RE.match(value):
        return True
    if kind == TokenKind.COLOR:
        return bool(
            _HEX_COLOR_RE.match(value) or _FUNC_COLOR_RE.match(value) or _KEYWORD_RE.match(value)
        )
    if kind == TokenKind.LENGTH:
        return value == "0" or bool(_LENGTH_RE.match(value))
    return True


class TokenSetValidator:
    """Validates token set structure and values."""

    def validate(self, token_set: TokenSet) -> ValidationResult:
        """
        Validate a token set.

        Args:
            token_set: The token set to validate

        Returns:
            ValidationResult with any issues found
        """
        result = ValidationResult()

        if not token_set.tokens:
            result.add_error(
                "EMPTY_TOKEN_SET",
                f"Token set '{token_set.name}' defines no tokens",
                "tokens",
            )
            return result

        seen: set[str] = set()
        for token in token_set.tokens:
            if token.name in seen:
                result.add_error(
                    "DUPLICATE_TOKEN",
                    f"Token '{token.name}' is defined more than once",
                    f"tokens.{token.name}",
                )
            seen.add(token.name)
            self._validate_token(token, result)

        return result

    def _validate_token(self, token: DesignToken, result: ValidationResult) -> None:
        """Validate one token's candidates."""
        location = f"tokens.{token.name}"

        if not token.candidates:
            result.add_error(
                "NO_CANDIDATES",
                f"Token '{token.name}' has no candidate values",
                location,
            )
            return

        priorities: set[int] = set()
        for candidate in token.candidates:
            if candidate.priority in priorities:
                result.add_error(
                    "DUPLICATE_PRIORITY",
                    f"Token '{token.name}' has more than one candidate "
                    f"with priority {candidate.priority}",
                    f"{location}.candidates",
                )
            priorities.add(candidate.priority)

        for candidate in token.candidates:
            # Hosts without a preference must always reach the fallback
            if candidate.when.appearance == AppearanceMode.UNSPECIFIED:
                result.add_error(
                    "UNSPECIFIED_APPEARANCE",
                    f"Candidate '{candidate.value}' (priority {candidate.priority}) is guarded "
                    f"by appearance 'unspecified'; use the fallback instead",
                    location,
                )

        fallback = token.fallback
        if fallback is None:
            result.add_error(
                "NO_FALLBACK",
                f"Token '{token.name}' has no unconditional fallback candidate",
                location,
            )
        else:
            fallbacks = [c for c in token.candidates if c.is_fallback]
            if len(fallbacks) > 1:
                result.add_error(
                    "MULTIPLE_FALLBACKS",
                    f"Token '{token.name}' has {len(fallbacks)} unconditional candidates; "
                    f"exactly one is allowed",
                    location,
                )
            for candidate in token.candidates:
                if candidate.priority < fallback.priority:
                    result.add_error(
                        "UNREACHABLE_CANDIDATE",
                        f"Candidate '{candidate.value}' (priority {candidate.priority}) ranks "
                        f"below the fallback and can never be selected",
                        location,
                    )

        for candidate in token.candidates:
            if not looks_like(token.kind, candidate.value):
                result.add_warning(
                    "INVALID_VALUE",
                    f"Value '{candidate.value}' does not look like a {token.kind.value}",
                    location,
                )
