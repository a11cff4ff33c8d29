"""
Token set loader - discovers and loads token set definitions.

Token sets can come from:
1. Built-in library (shipped with package)
2. Project token sets (user's project/themes directory)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_mcp_theme.models.token import ConfigurationError, DesignToken, TokenSet, TokenSetMetadata
from chuk_mcp_theme.themes.resolver import TokenResolver
from chuk_mcp_theme.themes.validator import TokenSetValidator

logger = logging.getLogger(__name__)


class TokenSetLoader:
    """
    Discovers and loads token set definitions.

    Token sets are loaded from YAML files in the library and project
    directories. Project token sets override library sets with the same name.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the token set loader.

        Args:
            library_path: Path to built-in token set library
            project_path: Path to project token sets directory
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._cache: dict[str, TokenSet] = {}
        self._resolvers: dict[str, TokenResolver] = {}
        self._validator = TokenSetValidator()

    def list_token_sets(self) -> list[TokenSetMetadata]:
        """
        List all available token sets.

        Returns token sets from both library and project, with project
        sets taking precedence. Files that fail to load are skipped.
        """
        token_sets: dict[str, TokenSetMetadata] = {}

        for path in self.token_set_files():
            try:
                token_set = self.load_file(path)
            except ConfigurationError as e:
                logger.warning(f"Skipping token set {path}: {e}")
                continue
            token_sets[token_set.name] = TokenSetMetadata.from_token_set(token_set)

        return sorted(token_sets.values(), key=lambda meta: meta.name)

    def token_set_files(self) -> list[Path]:
        """YAML files in the library, then the project (later files win)."""
        roots = [self.library_path]
        if self.project_path:
            roots.append(self.project_path)

        files: list[Path] = []
        for root in roots:
            if root.exists():
                files.extend(sorted(root.glob("*.yaml")))
        return files

    def get_token_set(self, name: str, *, validate: bool = True) -> TokenSet | None:
        """
        Get a token set by name.

        Project token sets take precedence over library token sets.

        Args:
            name: Token set name
            validate: Reject sets with structural errors

        Returns:
            TokenSet if found, None otherwise

        Raises:
            ConfigurationError: If the file exists but is malformed
        """
        if validate and name in self._cache:
            return self._cache[name]

        path = self.find_file(name)
        if path is None:
            return None

        token_set = self.load_file(path, validate=validate)
        if validate:
            self._cache[name] = token_set
        return token_set

    def get_resolver(self, name: str) -> TokenResolver | None:
        """
        Get the resolver for a token set, building it on first use.

        One resolver is kept per token set so its memo cache survives
        across calls.

        Args:
            name: Token set name

        Returns:
            TokenResolver if the token set exists, None otherwise

        Raises:
            ConfigurationError: If the file exists but is malformed
        """
        resolver = self._resolvers.get(name)
        if resolver is not None:
            return resolver

        token_set = self.get_token_set(name)
        if token_set is None:
            return None

        resolver = TokenResolver(token_set)
        self._resolvers[name] = resolver
        return resolver

    def find_file(self, name: str) -> Path | None:
        """Locate the YAML file for a token set, project first."""
        if self.project_path:
            project_file = self.project_path / f"{name}.yaml"
            if project_file.exists():
                return project_file

        library_file = self.library_path / f"{name}.yaml"
        if library_file.exists():
            return library_file

        return None

    def load_file(self, path: Path, *, validate: bool = True) -> TokenSet:
        """
        Load a token set from a YAML file.

        Args:
            path: YAML file to load
            validate: Also run structural validation

        Returns:
            The parsed token set

        Raises:
            ConfigurationError: On unreadable files, YAML errors, schema
                errors, or (when validating) structural errors
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Unable to read token set {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a YAML mapping in {path}")

        try:
            token_set = self._parse_token_set(data)
        except (ValidationError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid token set {path}: {e}") from e

        if validate:
            result = self._validator.validate(token_set)
            if not result.is_valid:
                details = "; ".join(issue.message for issue in result.errors)
                raise ConfigurationError(f"Invalid token set {path}: {details}", result.errors)

        return token_set

    def copy_to_project(self, name: str) -> Path | None:
        """
        Copy a library token set to the project for customization.

        Args:
            name: Token set name

        Returns:
            Path to copied file, or None if not found
        """
        if not self.project_path:
            raise ValueError("No project path configured")

        library_file = self.library_path / f"{name}.yaml"
        if not library_file.exists():
            return None

        self.project_path.mkdir(parents=True, exist_ok=True)

        dest_file = self.project_path / f"{name}.yaml"
        if dest_file.exists():
            raise ValueError(f"Token set already exists in project: {name}")

        dest_file.write_text(library_file.read_text())

        # Invalidate cache
        self._cache.pop(name, None)
        self._resolvers.pop(name, None)

        return dest_file

    def _parse_token_set(self, data: dict[str, Any]) -> TokenSet:
        """Parse a token set from YAML data."""
        tokens_data = data.get("tokens") or {}
        if not isinstance(tokens_data, dict):
            raise TypeError("'tokens' must be a mapping of token name to definition")

        tokens = [
            self._parse_token(name, token_data or {}) for name, token_data in tokens_data.items()
        ]

        return TokenSet.model_validate(
            {
                "schema": data.get("schema", "token-set/v1"),
                "name": data.get("name", "unknown"),
                "description": data.get("description", ""),
                "tokens": tokens,
            }
        )

    def _parse_token(self, name: str, data: dict[str, Any]) -> DesignToken:
        """Parse one token definition from YAML data."""
        if not isinstance(data, dict):
            raise TypeError(f"Token '{name}' must be a mapping")
        return DesignToken.model_validate(
            {
                "name": str(name),
                "kind": data.get("kind", "other"),
                "description": data.get("description", ""),
                "candidates": data.get("candidates") or [],
            }
        )

    def clear_cache(self) -> None:
        """Clear the token set and resolver caches."""
        self._cache.clear()
        self._resolvers.clear()
