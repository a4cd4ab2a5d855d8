"""
Rule Grouping: Partition Rules by Location

Every rule sharing a location ends up in the same storage object, so the
flat rule list is partitioned into groups before planning.

Ordering:
- Groups are ordered by the first appearance of their location
- Rules inside a group keep their input order

The ordering is held in an explicit list with a side index rather than
in a plain dict, so it does not depend on mapping iteration order.

Complexity: O(n) in the number of rules, O(1) lookup by location.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from s3redirects.core.types import RedirectGroup, RedirectRule


class RedirectGroups:
    """
    Ordered, read-only collection of redirect groups.

    Usage:
        groups = group_rules(rules)
        for group in groups:
            ...
        groups.get("/docs/old")
    """

    __slots__ = ("_groups", "_index")

    def __init__(self, groups: Sequence[RedirectGroup]) -> None:
        self._groups: tuple[RedirectGroup, ...] = tuple(groups)
        self._index: dict[str, int] = {}
        for position, group in enumerate(self._groups):
            if group.location in self._index:
                raise ValueError(f"Duplicate group location: {group.location!r}")
            self._index[group.location] = position

    def __iter__(self) -> Iterator[RedirectGroup]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, location: object) -> bool:
        return location in self._index

    def get(self, location: str) -> Optional[RedirectGroup]:
        position = self._index.get(location)
        return None if position is None else self._groups[position]

    @property
    def locations(self) -> list[str]:
        return [group.location for group in self._groups]

    @property
    def rule_count(self) -> int:
        return sum(len(group) for group in self._groups)

    def flatten(self) -> list[RedirectRule]:
        """Concatenate all rules in group order, then within-group order."""
        return [rule for group in self._groups for rule in group.rules]


def group_rules(rules: Iterable[RedirectRule]) -> RedirectGroups:
    """
    Partition rules into groups keyed by location.

    Total: no rule is rejected. Deterministic for a given input order.
    """
    order: list[str] = []
    buckets: dict[str, list[RedirectRule]] = {}

    for rule in rules:
        bucket = buckets.get(rule.location)
        if bucket is None:
            bucket = []
            buckets[rule.location] = bucket
            order.append(rule.location)
        bucket.append(rule)

    return RedirectGroups([
        RedirectGroup(location=location, rules=tuple(buckets[location]))
        for location in order
    ])
