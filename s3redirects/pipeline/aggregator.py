"""
Result Aggregation: Outcome Stream -> Run Summary

Consumes every outcome the scheduler yields, reports progress and
per-failure diagnostics through an observer, and produces the final
tally. Individual store errors never stop aggregation.

The observer is passed in explicitly so the pipeline has no hidden
logging dependency; LoggingObserver is the default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, Optional, Protocol, Sequence

from s3redirects.core.types import OperationOutcome
from s3redirects.observability.logging import StructuredLogger
from s3redirects.pipeline.planning import full_key


@dataclass(frozen=True, slots=True)
class RunSummary:
    """
    Per-run counts for logging and alerting.

    A nonzero error count is a partial failure; the run itself still
    completed.
    """
    rules: int
    groups: int
    processed: int
    created: int
    updated: int
    errors: int

    @property
    def succeeded(self) -> int:
        return self.processed - self.errors

    @property
    def completed_ok(self) -> bool:
        return self.errors == 0


class ProgressObserver(Protocol):
    """Receives pipeline events. All callbacks are synchronous."""

    def on_progress(self, processed: int, total: int, outcome: OperationOutcome) -> None:
        ...

    def on_error(self, outcome: OperationOutcome, key: str) -> None:
        ...

    def on_key_collision(self, key: str, locations: Sequence[str]) -> None:
        ...

    def on_finish(self, summary: RunSummary) -> None:
        ...


class LoggingObserver:
    """Writes pipeline events through a StructuredLogger."""

    __slots__ = ("_log",)

    def __init__(self, logger: Optional[StructuredLogger] = None) -> None:
        self._log = logger or StructuredLogger("s3redirects.run")

    def on_progress(self, processed: int, total: int, outcome: OperationOutcome) -> None:
        percent = (processed / total) * 100 if total else 100.0
        self._log.info(
            f"Processed {percent:.1f}%: {outcome.sub_path}",
            processed=processed,
            total=total,
            copied=outcome.copied,
        )

    def on_error(self, outcome: OperationOutcome, key: str) -> None:
        error = outcome.error
        self._log.error(
            f"Error {outcome.action} S3 object {key}: {error}",
            sub_path=outcome.sub_path,
            copied=outcome.copied,
            service_code=getattr(error, "service_code", None),
        )

    def on_key_collision(self, key: str, locations: Sequence[str]) -> None:
        self._log.warning(
            f"Storage key {key} is shared by locations {', '.join(locations)}; "
            "the last write to finish wins",
            sub_path=key,
            locations=list(locations),
        )

    def on_finish(self, summary: RunSummary) -> None:
        self._log.info(
            f"Finished with {summary.errors} error(s)",
            processed=summary.processed,
            objects_created=summary.created,
            objects_updated=summary.updated,
            errors=summary.errors,
        )


class ResultAggregator:
    """
    Tallies outcomes as they stream in.

    Usage:
        aggregator = ResultAggregator(prefix, total_groups=len(groups))
        summary = await aggregator.consume(scheduler.run(operations))
    """

    __slots__ = (
        "_prefix", "_total", "_rules", "_observer",
        "_processed", "_created", "_updated", "_errors", "_failures",
    )

    def __init__(
        self,
        prefix: str,
        total_groups: int,
        observer: Optional[ProgressObserver] = None,
        rule_count: int = 0,
    ) -> None:
        self._prefix = prefix
        self._total = total_groups
        self._rules = rule_count
        self._observer: ProgressObserver = observer or LoggingObserver()
        self._processed = 0
        self._created = 0
        self._updated = 0
        self._errors = 0
        self._failures: list[OperationOutcome] = []

    def record(self, outcome: OperationOutcome) -> None:
        """Account for one outcome and notify the observer."""
        self._processed += 1
        if outcome.copied:
            self._updated += 1
        else:
            self._created += 1
        self._observer.on_progress(self._processed, self._total, outcome)
        if outcome.error is not None:
            self._errors += 1
            self._failures.append(outcome)
            self._observer.on_error(outcome, full_key(self._prefix, outcome.sub_path))

    async def consume(self, outcomes: AsyncIterable[OperationOutcome]) -> RunSummary:
        """Drain the outcome stream, then report and return the summary."""
        async for outcome in outcomes:
            self.record(outcome)
        summary = self.summary()
        self._observer.on_finish(summary)
        return summary

    def summary(self) -> RunSummary:
        return RunSummary(
            rules=self._rules,
            groups=self._total,
            processed=self._processed,
            created=self._created,
            updated=self._updated,
            errors=self._errors,
        )

    @property
    def failures(self) -> list[OperationOutcome]:
        """Outcomes that carried a store error, in completion order."""
        return list(self._failures)
