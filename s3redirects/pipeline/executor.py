"""
Operation Executor: One Plan -> One Remote Write

Per-key state machine:

    Start --probe--> Probed --exists------> Updating --+
                            \\                          +--> Done
                             --missing----> Creating --+

- Updating: rewrite the existing object's metadata to exactly the
  plan's metadata, keep the body. outcome.copied = True.
- Creating: write a placeholder HTML body with the plan's metadata plus
  redirect-failure=not-found. outcome.copied = False.

A store-reported error ends the operation in Done with the error on the
outcome. Any other exception escapes execute() and is fatal to the run.

Existence is answered from the local build mirror, which is assumed to
have been synchronized to the bucket before the run. A diverged mirror
sends the key down the wrong branch; that is not detected here.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol, Union

from s3redirects.core import constants as C
from s3redirects.core.types import OperationOutcome, RedirectPlan
from s3redirects.storage.protocols import ObjectStore

logger = logging.getLogger(__name__)


class ExistenceOracle(Protocol):
    """Answers whether an object already exists at a sub path."""

    def exists(self, sub_path: str) -> bool:
        ...


class LocalMirrorOracle:
    """
    Probe the local build mirror instead of the remote store.

    One filesystem stat per key instead of one network round trip.
    Probe failures of any kind count as "does not exist".
    """

    __slots__ = ("_root",)

    def __init__(self, build_root: Union[str, os.PathLike[str]]) -> None:
        self._root = Path(build_root)

    @property
    def root(self) -> Path:
        return self._root

    def exists(self, sub_path: str) -> bool:
        try:
            # Absolute components would replace the root in a pathlib join
            return (self._root / sub_path.lstrip("/")).exists()
        except (OSError, ValueError):
            return False


class OperationExecutor:
    """
    Executes plans against an object store.

    Usage:
        executor = OperationExecutor(store, LocalMirrorOracle("./build"))
        outcome = await executor.execute(plan)
    """

    __slots__ = ("_store", "_oracle")

    def __init__(self, store: ObjectStore, oracle: ExistenceOracle) -> None:
        self._store = store
        self._oracle = oracle

    async def execute(self, plan: RedirectPlan) -> OperationOutcome:
        if self._oracle.exists(plan.sub_path):
            return await self._update(plan)
        return await self._create(plan)

    async def _update(self, plan: RedirectPlan) -> OperationOutcome:
        logger.debug("Replacing metadata on %s", plan.key)
        result = await self._store.replace_metadata(
            plan.key,
            C.CONTENT_TYPE_HTML,
            dict(plan.metadata),
        )
        if result.is_err():
            return OperationOutcome(sub_path=plan.sub_path, copied=True, error=result.error)
        return OperationOutcome(sub_path=plan.sub_path, copied=True)

    async def _create(self, plan: RedirectPlan) -> OperationOutcome:
        logger.debug("Creating placeholder object %s", plan.key)
        metadata = {**plan.metadata, C.FAILURE_MARKER_KEY: C.FAILURE_MARKER_VALUE}
        result = await self._store.put_object(
            plan.key,
            C.PLACEHOLDER_BODY,
            C.CONTENT_TYPE_HTML,
            metadata,
        )
        if result.is_err():
            return OperationOutcome(sub_path=plan.sub_path, copied=False, error=result.error)
        return OperationOutcome(sub_path=plan.sub_path, copied=False)
