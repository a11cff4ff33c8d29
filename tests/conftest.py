"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_theme.models.token import CandidateValue, Condition, DesignToken, TokenSet

LIBRARY_PATH = Path(__file__).parent.parent / "src" / "chuk_mcp_theme" / "themes" / "library"


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def library_path() -> Path:
    """Path to the built-in token set library."""
    return LIBRARY_PATH


@pytest.fixture
def accent_token_set() -> TokenSet:
    """Single color token with a dark variant."""
    return TokenSet(
        name="accent",
        tokens=[
            DesignToken(
                name="accent-color",
                kind="color",
                candidates=[
                    CandidateValue(
                        priority=1,
                        when=Condition(appearance="dark"),
                        value="rgb(181,134,255)",
                    ),
                    CandidateValue(priority=0, value="rgb(84,0,215)"),
                ],
            )
        ],
    )


@pytest.fixture
def inset_token_set() -> TokenSet:
    """Safe-area inset token with env() and constant() sources."""
    return TokenSet(
        name="insets",
        tokens=[
            DesignToken(
                name="inset-top",
                kind="length",
                candidates=[
                    CandidateValue(
                        priority=2,
                        when=Condition(capabilities=["inset-env"]),
                        value="env(safe-area-inset-top)",
                    ),
                    CandidateValue(
                        priority=1,
                        when=Condition(capabilities=["inset-constant"]),
                        value="constant(safe-area-inset-top)",
                    ),
                    CandidateValue(priority=0, value="0px"),
                ],
            )
        ],
    )
