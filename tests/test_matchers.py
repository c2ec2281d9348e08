"""Tests for pattern matchers and the area registry."""
import pytest

from linkstate_config.errors import (
    DuplicateAreaError,
    EmptyAreaRuleError,
    InvalidArgumentError,
    PatternCompileError,
)
from linkstate_config.matchers import (
    EMPTY_MATCHER,
    AreaRegistry,
    MatchKind,
    PatternMatcherSet,
)


class TestPatternMatcherSet:
    """Tests for PatternMatcherSet."""

    def test_prefix_wildcard_matches(self):
        """eth.* matches any eth interface."""
        matcher = PatternMatcherSet.compile(["eth.*"])
        assert matcher.match("eth0")
        assert matcher.match("eth12")

    def test_match_is_anchored(self):
        """eth0 must not match eth01 or xeth0 (no substring matches)."""
        matcher = PatternMatcherSet.compile(["eth0"])
        assert matcher.match("eth0")
        assert not matcher.match("eth01")
        assert not matcher.match("xeth0")

    def test_match_is_case_insensitive(self):
        matcher = PatternMatcherSet.compile(["eth.*"])
        assert matcher.match("ETH0")
        assert matcher.match("Eth1")

    def test_case_sensitive_set(self):
        matcher = PatternMatcherSet.compile(["eth.*"], case_sensitive=True)
        assert matcher.match("eth0")
        assert not matcher.match("ETH0")

    def test_any_pattern_matches(self):
        """Candidate matches if at least one pattern accepts it."""
        matcher = PatternMatcherSet.compile(["eth[0-9]+", "po[0-9]+"])
        assert matcher.match("po10")
        assert matcher.match("eth3")
        assert not matcher.match("lo")

    def test_empty_never_matches(self):
        assert EMPTY_MATCHER.is_empty
        assert not EMPTY_MATCHER.match("")
        assert not EMPTY_MATCHER.match("eth0")

    def test_compiled_is_not_empty(self):
        matcher = PatternMatcherSet.compile([".*"])
        assert not matcher.is_empty
        assert len(matcher) == 1
        assert matcher.patterns == (".*",)

    def test_backreferences_are_accepted(self):
        """Python re syntax, including backreferences, is allowed."""
        matcher = PatternMatcherSet.compile([r"(eth)\1[0-9]"])
        assert matcher.match("etheth0")
        assert not matcher.match("eth0")

    def test_direct_construction_compiles(self):
        """A set built without compile() still matches."""
        matcher = PatternMatcherSet(patterns=("eth.*",))
        assert not matcher.is_empty
        assert len(matcher) == 1
        assert matcher.match("eth0")
        assert not matcher.match("lo")

    def test_direct_construction_rejects_malformed_pattern(self):
        with pytest.raises(PatternCompileError) as exc:
            PatternMatcherSet(patterns=("eth[0",))
        assert exc.value.owner == "pattern set"

    def test_malformed_pattern_raises(self):
        """Compile error names the offending pattern and owner."""
        with pytest.raises(PatternCompileError) as exc:
            PatternMatcherSet.compile(["eth.*", "eth[0"], owner="include_interface_regexes")

        assert exc.value.pattern == "eth[0"
        assert exc.value.owner == "include_interface_regexes"
        assert "eth[0" in str(exc.value)

    def test_is_immutable(self):
        matcher = PatternMatcherSet.compile(["eth.*"])
        with pytest.raises(AttributeError):
            matcher.patterns = ("lo",)


class TestAreaRegistry:
    """Tests for AreaRegistry."""

    def test_add_area(self):
        registry = AreaRegistry()
        area = registry.add_area("spine", ["fsw.*"], ["eth.*"])

        assert area.area_id == "spine"
        assert "spine" in registry
        assert len(registry) == 1
        assert registry.area_ids == ["spine"]

    def test_area_count_matches_distinct_ids(self):
        registry = AreaRegistry()
        for area_id in ("a", "b", "c"):
            registry.add_area(area_id, ["n.*"], [])

        assert len(registry) == 3
        assert registry.area_ids == ["a", "b", "c"]

    def test_duplicate_area_raises(self):
        registry = AreaRegistry()
        registry.add_area("spine", ["fsw.*"], [])

        with pytest.raises(DuplicateAreaError) as exc:
            registry.add_area("spine", [], ["eth.*"])

        assert exc.value.area_id == "spine"
        assert len(registry) == 1

    def test_empty_rules_raise(self):
        registry = AreaRegistry()

        with pytest.raises(EmptyAreaRuleError):
            registry.add_area("spine", [], [])

        assert "spine" not in registry

    def test_empty_area_id_raises(self):
        with pytest.raises(InvalidArgumentError):
            AreaRegistry().add_area("", [".*"], [])

    def test_bad_pattern_names_area(self):
        registry = AreaRegistry()

        with pytest.raises(PatternCompileError) as exc:
            registry.add_area("spine", ["fsw(.*"], [])

        assert exc.value.pattern == "fsw(.*"
        assert "spine" in exc.value.owner

    def test_matches_by_kind(self):
        """Neighbor and interface matchers are independent."""
        registry = AreaRegistry()
        registry.add_area("spine", ["fsw.*"], ["eth.*"])

        assert registry.matches("spine", "fsw001", MatchKind.NEIGHBOR)
        assert not registry.matches("spine", "fsw001", MatchKind.INTERFACE)
        assert registry.matches("spine", "eth0", MatchKind.INTERFACE)
        assert not registry.matches("spine", "eth0", MatchKind.NEIGHBOR)

    def test_empty_kind_never_matches(self):
        """Area with only neighbor rules never matches interfaces."""
        registry = AreaRegistry()
        registry.add_area("spine", [".*"], [])

        assert registry.matches("spine", "anything", MatchKind.NEIGHBOR)
        assert not registry.matches("spine", "eth0", MatchKind.INTERFACE)

    def test_matches_accepts_string_kind(self):
        registry = AreaRegistry()
        registry.add_area("spine", [], ["eth.*"])
        assert registry.matches("spine", "eth0", "interface")

    def test_matches_unknown_area_raises(self):
        with pytest.raises(KeyError):
            AreaRegistry().matches("nope", "eth0", MatchKind.INTERFACE)

    def test_classify(self):
        registry = AreaRegistry()
        registry.add_area("spine", [], ["eth.*"])
        registry.add_area("pod", [], ["eth1.*", "po.*"])

        assert registry.classify("eth12", MatchKind.INTERFACE) == ["spine", "pod"]
        assert registry.classify("po1", MatchKind.INTERFACE) == ["pod"]
        assert registry.classify("lo", MatchKind.INTERFACE) == []

    def test_area_helpers(self):
        registry = AreaRegistry()
        area = registry.add_area("spine", ["fsw.*"], ["eth.*"])

        assert area.should_peer_with_neighbor("FSW002")
        assert area.should_discover_on_iface("eth3")
        assert not area.should_discover_on_iface("lo")

    def test_frozen_registry_rejects_additions(self):
        registry = AreaRegistry()
        registry.add_area("spine", [".*"], [])
        registry.freeze()

        with pytest.raises(RuntimeError):
            registry.add_area("pod", [".*"], [])
