"""
Unit Tests: Rule Grouping

Tests:
    - First-appearance group ordering
    - Within-group input ordering
    - Partition completeness over shuffled inputs
"""

import random

import pytest

from s3redirects.core.types import RedirectGroup, RedirectRule
from s3redirects.pipeline.grouping import RedirectGroups, group_rules


def _rule(location: str, redirect: str, pattern=None) -> RedirectRule:
    return RedirectRule(location=location, redirect=redirect, pattern=pattern)


# =============================================================================
# GROUPING TESTS
# =============================================================================
class TestGroupRules:
    """Tests for group_rules."""

    def test_empty(self):
        groups = group_rules([])
        assert len(groups) == 0
        assert groups.locations == []

    def test_interleaved_locations(self):
        rules = [
            _rule("/a", "/x"),
            _rule("/b", "/y"),
            _rule("/a", "/z", "^/a/z$"),
        ]
        groups = group_rules(rules)

        assert groups.locations == ["/a", "/b"]
        assert [r.redirect for r in groups.get("/a").rules] == ["/x", "/z"]
        assert [r.redirect for r in groups.get("/b").rules] == ["/y"]

    def test_locations_compared_exactly(self):
        groups = group_rules([_rule("/a", "/x"), _rule("/a/", "/y")])
        assert groups.locations == ["/a", "/a/"]

    def test_duplicate_rules_kept(self):
        rule = _rule("/a", "/x")
        groups = group_rules([rule, rule])
        assert len(groups.get("/a")) == 2

    def test_accepts_generator(self):
        groups = group_rules(_rule(f"/{i % 3}", f"/r{i}") for i in range(9))
        assert len(groups) == 3
        assert groups.rule_count == 9

    @pytest.mark.parametrize("seed", [1, 7, 42, 1234])
    def test_partition_properties(self, seed):
        rng = random.Random(seed)
        locations = [f"/loc/{n}" for n in range(12)]
        rules = [
            _rule(rng.choice(locations), f"/target/{i}")
            for i in range(200)
        ]
        groups = group_rules(rules)

        # Every rule lands in exactly one group
        assert groups.rule_count == len(rules)
        assert sorted(r.redirect for r in groups.flatten()) == sorted(r.redirect for r in rules)

        # Group order follows first appearance
        first_seen = list(dict.fromkeys(r.location for r in rules))
        assert groups.locations == first_seen

        # Rules inside a group keep input order
        for group in groups:
            expected = [r for r in rules if r.location == group.location]
            assert list(group.rules) == expected

    def test_deterministic(self):
        rules = [_rule("/b", "/1"), _rule("/a", "/2"), _rule("/b", "/3")]
        assert list(group_rules(rules)) == list(group_rules(rules))


# =============================================================================
# COLLECTION TESTS
# =============================================================================
class TestRedirectGroups:
    """Tests for the RedirectGroups container."""

    def test_contains_and_get(self):
        groups = group_rules([_rule("/a", "/x")])
        assert "/a" in groups
        assert "/b" not in groups
        assert groups.get("/b") is None

    def test_duplicate_location_rejected(self):
        group = RedirectGroup(location="/a", rules=(_rule("/a", "/x"),))
        with pytest.raises(ValueError):
            RedirectGroups([group, group])

    def test_flatten_is_group_order(self):
        rules = [_rule("/a", "/1"), _rule("/b", "/2"), _rule("/a", "/3")]
        flat = group_rules(rules).flatten()
        assert [r.redirect for r in flat] == ["/1", "/3", "/2"]


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
