"""
S3 Redirect Object Generator

Turns a list of URL redirect rules into storage objects an edge proxy
reads to perform redirects:
- One object per source location, at <prefix>/<location>/index.html
- Redirect targets and patterns carried as object metadata
- Existing objects keep their body; missing ones get a placeholder
- All writes run under a fixed concurrency cap
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from s3redirects.core.types import (
    Result,
    Ok,
    Err,
    RedirectRule,
    RedirectGroup,
    RedirectPlan,
    OperationOutcome,
)
from s3redirects.core.errors import (
    RedirectError,
    ConfigurationError,
    InputError,
    StoreError,
    PlanningError,
)
from s3redirects.core.config import RedirectsConfig, S3Config
from s3redirects.pipeline import (
    BoundedScheduler,
    ResultAggregator,
    RunSummary,
    group_rules,
    make_redirect_objects,
    plan_object,
    run,
)

__all__ = [
    "__version__",
    "Result",
    "Ok",
    "Err",
    "RedirectRule",
    "RedirectGroup",
    "RedirectPlan",
    "OperationOutcome",
    "RedirectError",
    "ConfigurationError",
    "InputError",
    "StoreError",
    "PlanningError",
    "RedirectsConfig",
    "S3Config",
    "BoundedScheduler",
    "ResultAggregator",
    "RunSummary",
    "group_rules",
    "make_redirect_objects",
    "plan_object",
    "run",
]
