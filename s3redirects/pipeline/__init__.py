"""
Pipeline module: Grouping, planning, bounded scheduling, and aggregation.
"""

from s3redirects.pipeline.grouping import RedirectGroups, group_rules
from s3redirects.pipeline.planning import plan_object, storage_sub_path
from s3redirects.pipeline.executor import LocalMirrorOracle, OperationExecutor
from s3redirects.pipeline.scheduler import BoundedScheduler, run_bounded
from s3redirects.pipeline.aggregator import (
    LoggingObserver,
    ProgressObserver,
    ResultAggregator,
    RunSummary,
)
from s3redirects.pipeline.runner import make_redirect_objects, run

__all__ = [
    "RedirectGroups",
    "group_rules",
    "plan_object",
    "storage_sub_path",
    "LocalMirrorOracle",
    "OperationExecutor",
    "BoundedScheduler",
    "run_bounded",
    "LoggingObserver",
    "ProgressObserver",
    "ResultAggregator",
    "RunSummary",
    "make_redirect_objects",
    "run",
]
