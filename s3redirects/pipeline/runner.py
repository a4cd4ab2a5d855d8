"""
Redirect Object Pipeline

Orchestrates the complete write path:
1. Group rules by location
2. Check for storage-key collisions between distinct locations
3. Lazily plan one object per group
4. Execute create/update operations under a concurrency cap
5. Aggregate outcomes into a run summary

Only structured store errors are tolerated per object. Any other
exception stops the run and propagates to the caller.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Iterable, Iterator, Optional, Union
from uuid import uuid4

from s3redirects.core.config import RedirectsConfig
from s3redirects.core.errors import PlanningError
from s3redirects.core.types import RedirectRule
from s3redirects.observability.logging import StructuredLogger
from s3redirects.pipeline.aggregator import (
    LoggingObserver,
    ProgressObserver,
    ResultAggregator,
    RunSummary,
)
from s3redirects.pipeline.executor import (
    ExistenceOracle,
    LocalMirrorOracle,
    OperationExecutor,
)
from s3redirects.pipeline.grouping import group_rules
from s3redirects.pipeline.planning import find_key_collisions, iter_plans
from s3redirects.pipeline.scheduler import BoundedScheduler
from s3redirects.sources import load_redirects
from s3redirects.storage.protocols import ObjectStore
from s3redirects.storage.s3_store import S3ObjectStore

logger = logging.getLogger(__name__)


async def make_redirect_objects(
    store: ObjectStore,
    build_path: Union[str, os.PathLike[str]],
    prefix: str,
    parallel: int,
    rules: Iterable[RedirectRule],
    observer: Optional[ProgressObserver] = None,
    fail_on_key_collision: bool = False,
    oracle: Optional[ExistenceOracle] = None,
) -> RunSummary:
    """
    Make objects representing all the redirects.

    Args:
        store: Target object store.
        build_path: Local mirror of the bucket contents under prefix.
        prefix: Key prefix for every object written.
        parallel: Maximum concurrently outstanding store operations.
        rules: Redirect rules in input order.
        observer: Progress/error sink (defaults to logging).
        fail_on_key_collision: Raise instead of warning when two
            locations derive the same storage key.
        oracle: Existence check override (defaults to the build mirror).

    Raises:
        PlanningError: On key collision with fail_on_key_collision set.
        Exception: Any non-store error from an operation.
    """
    observer = observer or LoggingObserver()
    rule_list = list(rules)
    groups = group_rules(rule_list)
    logger.debug("Grouped %d rule(s) into %d location(s)", len(rule_list), len(groups))

    for key, locations in find_key_collisions(groups).items():
        if fail_on_key_collision:
            raise PlanningError.key_collision(key, locations)
        observer.on_key_collision(key, locations)

    executor = OperationExecutor(store, oracle or LocalMirrorOracle(build_path))
    scheduler = BoundedScheduler(parallel)
    aggregator = ResultAggregator(
        prefix,
        total_groups=len(groups),
        observer=observer,
        rule_count=len(rule_list),
    )

    # Plain generator: each coroutine starts only when the scheduler pulls it
    operations = (executor.execute(plan) for plan in iter_plans(prefix, groups))
    return await aggregator.consume(scheduler.run(operations))


async def run(
    config: RedirectsConfig,
    observer: Optional[ProgressObserver] = None,
) -> RunSummary:
    """
    Validate configuration, load rules, and write all redirect objects.

    Raises:
        ConfigurationError: Invalid configuration.
        InputError: Rule source could not be loaded or validated.
        PlanningError: Key collision in strict mode.
    """
    validation = config.validate()
    if validation.is_err():
        raise validation.error

    run_log = StructuredLogger("s3redirects.run")
    with run_log.context(run_id=uuid4().hex[:12], bucket=config.bucket, prefix=config.prefix):
        rules = await load_redirects(config.redirects_source)
        run_log.info(
            f"Loaded {len(rules)} redirect(s) from {config.redirects_source}",
            parallel=config.parallel,
        )

        s3_config = config.s3
        if s3_config.max_pool_connections < config.parallel:
            s3_config = replace(s3_config, max_pool_connections=config.parallel)

        async with S3ObjectStore(config.bucket, s3_config) as store:
            return await make_redirect_objects(
                store,
                config.build_path,
                config.prefix,
                config.parallel,
                rules,
                observer=observer or LoggingObserver(run_log),
                fail_on_key_collision=config.fail_on_key_collision,
            )


def plan_preview(prefix: str, rules: Iterable[RedirectRule]) -> Iterator[tuple[str, dict[str, str]]]:
    """Yield (key, metadata) for each group without touching any store."""
    for plan in iter_plans(prefix, group_rules(rules)):
        yield plan.key, dict(plan.metadata)
