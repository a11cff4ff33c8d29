"""
Tests for the token resolver.

Tests cover:
- The accent and safe-area inset scenarios
- Precedence by priority rather than declaration order
- Totality, determinism and the fallback guarantee
- Construction-time validation
- explain() traces and the memo cache
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from chuk_mcp_theme.constants import AppearanceMode, Capability
from chuk_mcp_theme.models.token import (
    CandidateValue,
    Condition,
    ConfigurationError,
    DesignToken,
    TokenSet,
)
from chuk_mcp_theme.themes import TokenResolver, TokenSetLoader, resolve


@pytest.fixture
def blog_token_set(library_path) -> TokenSet:
    """The built-in blog token set."""
    token_set = TokenSetLoader(library_path=library_path).get_token_set("blog")
    assert token_set is not None
    return token_set


@pytest.fixture
def layered_token_set() -> TokenSet:
    """Candidates declared out of priority order."""
    return TokenSet(
        name="layered",
        tokens=[
            DesignToken(
                name="surface",
                candidates=[
                    CandidateValue(priority=1, value="c3-fallback"),
                    CandidateValue(priority=2, when=Condition(capabilities=["x"]), value="c2-x"),
                    CandidateValue(priority=3, when=Condition(appearance="dark"), value="c1-dark"),
                ],
            )
        ],
    )


class TestAccentScenario:
    """A color with a dark-mode variant."""

    def test_dark(self, accent_token_set):
        """Dark mode picks the dark candidate."""
        resolved = TokenResolver(accent_token_set).resolve(AppearanceMode.DARK)
        assert resolved.as_dict() == {"accent-color": "rgb(181,134,255)"}

    def test_unspecified(self, accent_token_set):
        """Without a preference the fallback applies."""
        resolved = TokenResolver(accent_token_set).resolve(AppearanceMode.UNSPECIFIED)
        assert resolved.as_dict() == {"accent-color": "rgb(84,0,215)"}

    def test_light(self, accent_token_set):
        """Light mode has no dedicated candidate and falls back."""
        resolved = TokenResolver(accent_token_set).resolve("light")
        assert resolved["accent-color"] == "rgb(84,0,215)"


class TestInsetScenario:
    """Safe-area insets with two query mechanisms."""

    def test_no_capabilities(self, inset_token_set):
        """Unsupported hosts get 0px."""
        resolved = TokenResolver(inset_token_set).resolve(capabilities=[])
        assert resolved.as_dict() == {"inset-top": "0px"}
        assert resolved.sources == {"inset-top": 0}

    def test_constant_only(self, inset_token_set):
        """Legacy hosts get constant()."""
        resolved = TokenResolver(inset_token_set).resolve(capabilities=["inset-constant"])
        assert resolved["inset-top"] == "constant(safe-area-inset-top)"
        assert resolved.sources["inset-top"] == 1

    def test_both_prefers_env(self, inset_token_set):
        """The higher-priority env() wins when both are available."""
        resolved = TokenResolver(inset_token_set).resolve(
            capabilities=[Capability.INSET_ENV, Capability.INSET_CONSTANT]
        )
        assert resolved["inset-top"] == "env(safe-area-inset-top)"
        assert resolved.sources["inset-top"] == 2
        assert resolved.capabilities == ["inset-constant", "inset-env"]


class TestPrecedence:
    """Highest satisfied priority wins regardless of declaration order."""

    def test_highest_priority_wins(self, layered_token_set):
        """Dark plus capability X picks the priority-3 candidate."""
        resolved = TokenResolver(layered_token_set).resolve("dark", ["x"])
        assert resolved["surface"] == "c1-dark"

    def test_next_priority_when_top_fails(self, layered_token_set):
        """Light plus X picks the priority-2 candidate."""
        resolved = TokenResolver(layered_token_set).resolve("light", ["x"])
        assert resolved["surface"] == "c2-x"

    def test_fallback_when_nothing_else_holds(self, layered_token_set):
        """Without dark or X only the fallback holds."""
        resolved = TokenResolver(layered_token_set).resolve("light")
        assert resolved["surface"] == "c3-fallback"

    def test_unknown_capability_is_ignored(self, inset_token_set):
        """Capabilities no candidate asks for change nothing."""
        resolved = TokenResolver(inset_token_set).resolve(capabilities=["hover"])
        assert resolved["inset-top"] == "0px"

    def test_combined_condition(self):
        """A candidate can require both an appearance and a capability."""
        token_set = TokenSet(
            name="combined",
            tokens=[
                DesignToken(
                    name="inset-top",
                    candidates=[
                        CandidateValue(
                            priority=2,
                            when=Condition(appearance="dark", capabilities=["inset-env"]),
                            value="calc(env(safe-area-inset-top) + 4px)",
                        ),
                        CandidateValue(priority=0, value="0px"),
                    ],
                )
            ],
        )
        resolver = TokenResolver(token_set)
        assert resolver.resolve("dark", ["inset-env"])["inset-top"].startswith("calc(")
        assert resolver.resolve("dark")["inset-top"] == "0px"
        assert resolver.resolve("light", ["inset-env"])["inset-top"] == "0px"


class TestProperties:
    """Totality, determinism and the fallback guarantee."""

    def test_totality(self, blog_token_set):
        """Every reachable state resolves every token."""
        resolver = TokenResolver(blog_token_set)
        names = blog_token_set.token_names()
        for resolved in resolver.resolve_all():
            assert list(resolved.values) == names

    def test_resolve_all_covers_every_state(self, inset_token_set):
        """Three appearance modes times every capability subset."""
        states = TokenResolver(inset_token_set).resolve_all()
        assert len(states) == 3 * 4
        keys = {(s.appearance, tuple(s.capabilities)) for s in states}
        assert len(keys) == 12

    def test_determinism(self, blog_token_set):
        """Identical input gives identical output."""
        resolver = TokenResolver(blog_token_set)
        first = resolver.resolve("dark", ["inset-env"])
        second = resolver.resolve("dark", ["inset-env"])
        assert first == second
        assert first is not second
        assert TokenResolver(blog_token_set).resolve("dark", ["inset-env"]) == first

    @pytest.mark.parametrize(
        "candidates",
        [
            pytest.param(
                [
                    CandidateValue(priority=1, when=Condition(appearance="dark"), value="red"),
                    CandidateValue(priority=0, value="blue"),
                ],
                id="dark-variant",
            ),
            pytest.param(
                [
                    CandidateValue(priority=2, when=Condition(appearance="light"), value="white"),
                    CandidateValue(priority=1, when=Condition(appearance="dark"), value="black"),
                    CandidateValue(priority=0, value="grey"),
                ],
                id="light-and-dark",
            ),
            pytest.param(
                [
                    CandidateValue(
                        priority=3,
                        when=Condition(appearance="dark", capabilities=["inset-env"]),
                        value="env(safe-area-inset-top)",
                    ),
                    CandidateValue(
                        priority=2, when=Condition(capabilities=["inset-env"]), value="4px"
                    ),
                    CandidateValue(priority=0, value="0px"),
                ],
                id="combined-guards",
            ),
            pytest.param(
                [
                    CandidateValue(
                        priority=1, when=Condition(appearance="unspecified"), value="red"
                    ),
                    CandidateValue(priority=0, value="blue"),
                ],
                id="unspecified-guard",
            ),
            pytest.param(
                [
                    CandidateValue(priority=5, value="red"),
                    CandidateValue(priority=0, value="blue"),
                ],
                id="two-fallbacks",
            ),
            pytest.param(
                [
                    CandidateValue(priority=5, value="white"),
                    CandidateValue(priority=1, when=Condition(appearance="dark"), value="black"),
                ],
                id="fallback-ranked-above",
            ),
        ],
    )
    def test_fallback_guarantee(self, candidates):
        """Unspecified with no capabilities yields the lowest-priority fallback, or is rejected."""
        token_set = TokenSet(name="shapes", tokens=[DesignToken(name="accent", candidates=candidates)])
        expected = min(
            (c for c in candidates if c.when.appearance is None and not c.when.capabilities),
            key=lambda c: c.priority,
        ).value

        try:
            resolver = TokenResolver(token_set)
        except ConfigurationError:
            return
        assert resolver.resolve(AppearanceMode.UNSPECIFIED, [])["accent"] == expected

    def test_fallback_guarantee_blog(self, blog_token_set):
        """Every blog token falls back to its lowest-priority candidate."""
        resolved = TokenResolver(blog_token_set).resolve(AppearanceMode.UNSPECIFIED, [])
        for token in blog_token_set.tokens:
            assert resolved[token.name] == token.ordered_candidates()[-1].value

    def test_results_are_independent(self, accent_token_set):
        """Mutating one result does not leak into the next."""
        resolver = TokenResolver(accent_token_set)
        first = resolver.resolve("dark")
        first.values["accent-color"] = "tampered"
        assert resolver.resolve("dark")["accent-color"] == "rgb(181,134,255)"

    def test_concurrent_calls_agree(self, blog_token_set):
        """Concurrent resolution needs no coordination."""
        resolver = TokenResolver(blog_token_set)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: resolver.resolve("dark", ["inset-env"]), range(64)))
        assert all(r == results[0] for r in results)


class TestConstruction:
    """Malformed token sets fail fast."""

    def test_missing_fallback(self):
        """A token without an unconditional candidate is a configuration error."""
        token_set = TokenSet(
            name="broken",
            tokens=[
                DesignToken(
                    name="hover-foreground",
                    candidates=[
                        CandidateValue(
                            priority=1, when=Condition(appearance="dark"), value="white"
                        ),
                    ],
                )
            ],
        )
        with pytest.raises(ConfigurationError) as exc_info:
            TokenResolver(token_set)
        assert [issue.code for issue in exc_info.value.issues] == ["NO_FALLBACK"]
        assert "hover-foreground" in str(exc_info.value)

    def test_empty_token_set(self):
        """An empty set is a configuration error."""
        with pytest.raises(ConfigurationError):
            TokenResolver(TokenSet(name="empty"))

    def test_duplicate_priority(self):
        """Colliding priorities are a configuration error."""
        token_set = TokenSet(
            name="ties",
            tokens=[
                DesignToken(
                    name="background",
                    candidates=[
                        CandidateValue(priority=0, value="white"),
                        CandidateValue(priority=0, when=Condition(appearance="dark"), value="black"),
                    ],
                )
            ],
        )
        with pytest.raises(ConfigurationError):
            TokenResolver(token_set)

    def test_unspecified_guard_rejected(self):
        """A candidate guarded by 'unspecified' cannot outrank the fallback."""
        token_set = TokenSet(
            name="shadowed",
            tokens=[
                DesignToken(
                    name="accent",
                    candidates=[
                        CandidateValue(
                            priority=1, when=Condition(appearance="unspecified"), value="red"
                        ),
                        CandidateValue(priority=0, value="blue"),
                    ],
                )
            ],
        )
        with pytest.raises(ConfigurationError) as exc_info:
            TokenResolver(token_set)
        assert [issue.code for issue in exc_info.value.issues] == ["UNSPECIFIED_APPEARANCE"]

    def test_multiple_fallbacks_rejected(self):
        """Two unconditional candidates are a configuration error."""
        token_set = TokenSet(
            name="doubled",
            tokens=[
                DesignToken(
                    name="accent",
                    candidates=[
                        CandidateValue(priority=5, value="red"),
                        CandidateValue(priority=0, value="blue"),
                    ],
                )
            ],
        )
        with pytest.raises(ConfigurationError) as exc_info:
            TokenResolver(token_set)
        assert [issue.code for issue in exc_info.value.issues] == ["MULTIPLE_FALLBACKS"]

    def test_fallback_must_rank_lowest(self):
        """A candidate ranked below the fallback is a configuration error."""
        token_set = TokenSet(
            name="inverted",
            tokens=[
                DesignToken(
                    name="background",
                    candidates=[
                        CandidateValue(priority=5, value="white"),
                        CandidateValue(
                            priority=1, when=Condition(appearance="dark"), value="black"
                        ),
                    ],
                )
            ],
        )
        with pytest.raises(ConfigurationError) as exc_info:
            TokenResolver(token_set)
        assert [issue.code for issue in exc_info.value.issues] == ["UNREACHABLE_CANDIDATE"]

    def test_warnings_do_not_block(self):
        """Warnings alone still allow a resolver."""
        token_set = TokenSet(
            name="warned",
            tokens=[
                DesignToken(
                    name="background",
                    kind="color",
                    candidates=[CandidateValue(priority=0, value="12px")],
                )
            ],
        )
        assert TokenResolver(token_set).resolve()["background"] == "12px"

    def test_invalid_appearance_is_not_configuration_error(self, accent_token_set):
        """Bad caller input is a plain ValueError."""
        resolver = TokenResolver(accent_token_set)
        with pytest.raises(ValueError) as exc_info:
            resolver.resolve("sepia")
        assert not isinstance(exc_info.value, ConfigurationError)


class TestExplain:
    """Tests for explain traces."""

    def test_trace(self, inset_token_set):
        """Candidates are listed in evaluation order with one selected."""
        trace = TokenResolver(inset_token_set).explain(
            "inset-top", capabilities=["inset-constant"]
        )
        assert [step.priority for step in trace] == [2, 1, 0]
        assert [step.matched for step in trace] == [False, True, True]
        assert [step.selected for step in trace] == [False, True, False]
        assert trace[0].condition == "requires inset-env"
        assert trace[2].condition == "always"

    def test_unknown_token(self, inset_token_set):
        """Unknown tokens raise KeyError."""
        with pytest.raises(KeyError):
            TokenResolver(inset_token_set).explain("inset-bottom")


class TestCache:
    """Tests for the memo cache."""

    def test_one_entry_per_state(self, inset_token_set):
        """Equal ambient states share a cache entry."""
        resolver = TokenResolver(inset_token_set)
        resolver.resolve("dark", ["inset-env", "inset-constant"])
        resolver.resolve(AppearanceMode.DARK, [Capability.INSET_CONSTANT, Capability.INSET_ENV])
        assert len(resolver._cache) == 1

        resolver.resolve("light")
        assert len(resolver._cache) == 2

    def test_clear_cache(self, inset_token_set):
        """Clearing drops memoized results without changing answers."""
        resolver = TokenResolver(inset_token_set)
        before = resolver.resolve(capabilities=["inset-env"])
        resolver.clear_cache()
        assert resolver._cache == {}
        assert resolver.resolve(capabilities=["inset-env"]) == before


class TestResolveFunction:
    """Tests for the one-shot resolve()."""

    def test_returns_plain_mapping(self, accent_token_set):
        """Returns token name to value."""
        assert resolve(accent_token_set, "dark") == {"accent-color": "rgb(181,134,255)"}

    def test_validates(self):
        """Also fails fast on malformed sets."""
        with pytest.raises(ConfigurationError):
            resolve(TokenSet(name="empty"))
