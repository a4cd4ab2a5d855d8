"""
Input Validation Rules

Pure predicates applied before a run starts:
- S3 general-purpose bucket naming rules
- Key prefix shape
- Redirect rule shape (JSON object level)

Bucket rules follow
https://docs.aws.amazon.com/AmazonS3/latest/userguide/bucketnamingrules.html
"""

from __future__ import annotations

import re
from typing import Any, Final

_BUCKET_SHAPE: Final = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")
_IPV4_SHAPE: Final = re.compile(r"^\d+\.\d+\.\d+\.\d+$")
_PREFIX_SHAPE: Final = re.compile(r"^[a-z0-9.-]+(/[a-z0-9.-]+)*$")

_RESERVED_BUCKET_PREFIXES: Final[tuple[str, ...]] = (
    "xn--",
    "sthree-",
    "amzn-s3-demo-",
)
_RESERVED_BUCKET_SUFFIXES: Final[tuple[str, ...]] = (
    "-s3alias",     # access point aliases
    "--ol-s3",      # Object Lambda access point aliases
    ".mrap",        # Multi-Region access points
    "--x-s3",       # directory buckets
    "--table-s3",   # S3 Tables buckets
)


def is_valid_bucket_name(bucket: str) -> bool:
    """Check S3's rules for general-purpose bucket names."""
    if not isinstance(bucket, str):
        return False
    # 3-63 chars, lowercase/digits/dots/hyphens, alnum at both ends
    if _BUCKET_SHAPE.fullmatch(bucket) is None:
        return False
    if ".." in bucket:
        return False
    if _IPV4_SHAPE.fullmatch(bucket) is not None:
        return False
    if bucket.startswith(_RESERVED_BUCKET_PREFIXES):
        return False
    if bucket.endswith(_RESERVED_BUCKET_SUFFIXES):
        return False
    return True


def is_valid_prefix(prefix: str) -> bool:
    """Slash-separated segments of [a-z0-9.-], no empty segments."""
    return isinstance(prefix, str) and _PREFIX_SHAPE.fullmatch(prefix) is not None


def is_redirect(value: Any) -> bool:
    """
    Check a decoded JSON value is a redirect rule.

    location and redirect must be strings. pattern is optional, but
    when the key is present its value must be a string (null is rejected).
    """
    if not isinstance(value, dict):
        return False
    if not isinstance(value.get("location"), str):
        return False
    if not isinstance(value.get("redirect"), str):
        return False
    if "pattern" in value and not isinstance(value["pattern"], str):
        return False
    return True
