"""
Object Planning: Group -> (Key, Metadata)

Pure functions, no I/O. A plan is fully determined by the prefix, the
group location, and the group's rules.

Key derivation:
    "/a/b"  -> "a/b/index.html"
    "/a/b/" -> "a/b/index.html"
    "a"     -> "a/index.html"

Metadata layout (1-based per group):
    redirect-location-{i} = rule.redirect
    redirect-pattern-{i}  = rule.pattern   (only when the rule has one)
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from s3redirects.core import constants as C
from s3redirects.core.types import RedirectGroup, RedirectPlan, RedirectRule


def storage_sub_path(location: str) -> str:
    """Append index.html to a location and drop one leading slash."""
    if location.endswith("/"):
        path = f"{location}{C.INDEX_DOCUMENT}"
    else:
        path = f"{location}/{C.INDEX_DOCUMENT}"
    return path[1:] if path.startswith("/") else path


def full_key(prefix: str, sub_path: str) -> str:
    """Join prefix and sub path. An empty prefix means the bucket root."""
    return f"{prefix}/{sub_path}" if prefix else sub_path


def build_metadata(rules: Sequence[RedirectRule]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for i, rule in enumerate(rules, start=1):
        metadata[C.REDIRECT_LOCATION_KEY.format(index=i)] = rule.redirect
        if rule.pattern is not None:
            metadata[C.REDIRECT_PATTERN_KEY.format(index=i)] = rule.pattern
    return metadata


def plan_object(prefix: str, location: str, rules: Sequence[RedirectRule]) -> RedirectPlan:
    """Map one group to its storage key and metadata document."""
    sub_path = storage_sub_path(location)
    return RedirectPlan(
        location=location,
        sub_path=sub_path,
        key=full_key(prefix, sub_path),
        metadata=build_metadata(rules),
    )


def plan_group(prefix: str, group: RedirectGroup) -> RedirectPlan:
    return plan_object(prefix, group.location, group.rules)


def iter_plans(prefix: str, groups: Iterable[RedirectGroup]) -> Iterator[RedirectPlan]:
    """Lazily produce one plan per group, in group order."""
    for group in groups:
        yield plan_group(prefix, group)


def find_key_collisions(groups: Iterable[RedirectGroup]) -> dict[str, list[str]]:
    """
    Find distinct locations that derive the same storage key.

    Returns:
        Mapping of sub path -> colliding locations (first-seen order),
        containing only keys claimed by more than one location.
    """
    claims: dict[str, list[str]] = {}
    for group in groups:
        claims.setdefault(storage_sub_path(group.location), []).append(group.location)
    return {key: locations for key, locations in claims.items() if len(locations) > 1}
