"""
Constants for Redirect Object Generation

Object layout, metadata key names, and configuration defaults
centralized here. Metadata keys are read by the edge proxy and must
stay byte-for-byte stable.
"""

from typing import Final

# =============================================================================
# OBJECT LAYOUT
# =============================================================================
INDEX_DOCUMENT: Final[str] = "index.html"
CONTENT_TYPE_HTML: Final[str] = "text/html"

# Body written for locations with no real document behind them
PLACEHOLDER_BODY: Final[str] = "<!doctype html><title>?</title>"

# =============================================================================
# METADATA KEYS
# =============================================================================
REDIRECT_LOCATION_KEY: Final[str] = "redirect-location-{index}"
REDIRECT_PATTERN_KEY: Final[str] = "redirect-pattern-{index}"

FAILURE_MARKER_KEY: Final[str] = "redirect-failure"
FAILURE_MARKER_VALUE: Final[str] = "not-found"

# =============================================================================
# DEFAULTS
# =============================================================================
DEFAULT_PARALLEL: Final[int] = 10
DEFAULT_REGION: Final[str] = "us-east-1"
DEFAULT_CONNECT_TIMEOUT_SECONDS: Final[int] = 5
DEFAULT_READ_TIMEOUT_SECONDS: Final[int] = 60
DEFAULT_MAX_RETRIES: Final[int] = 3
HTTP_TIMEOUT_SECONDS: Final[float] = 30.0

ENV_PREFIX: Final[str] = "S3REDIRECTS"
