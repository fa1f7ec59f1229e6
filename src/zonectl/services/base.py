"""BaseService — shared foundation for zonectl services.

Every service receives a :class:`SnapshotStore` at construction time and
converts snapshot-store and hydration exceptions into failed
ServiceResults at its boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from zonectl.domain.dag import BaselineModeError, HydratedDag, build_hydrated_dag
from zonectl.infrastructure.snapshots import (
    CachedTargetsNotFoundError,
    FailedToFetchCachedTargetsError,
    InvalidCachedTargetsError,
    InvalidStorageKeyError,
    SnapshotStoreError,
)
from zonectl.services.result import ServiceResult
from zonectl.services.telemetry import trace_span

if TYPE_CHECKING:
    from zonectl.domain.targets import Snapshot
    from zonectl.infrastructure.store import SnapshotStore

logger = logging.getLogger(__name__)

# Exceptions a service turns into a failed ServiceResult.
HANDLED_ERRORS: tuple[type[Exception], ...] = (SnapshotStoreError, BaselineModeError)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class AffectedService(BaseService):
            def affected(self, baseline_sha: str, ...) -> ServiceResult:
                try:
                    dag, partials = self._load_dag(baseline_sha, head_shas)
                except HANDLED_ERRORS as exc:
                    return self._error_result("affected", exc)
                ...
    """

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    def _load_dag(
        self,
        baseline_sha: str,
        head_shas: Sequence[str],
    ) -> tuple[HydratedDag, list[Snapshot]]:
        """Fetch the baseline and head snapshots and hydrate them in order."""
        with trace_span("fetch_snapshots") as span:
            baseline, partials = self._store.fetch_graph_inputs(baseline_sha, head_shas)
            if span:
                span.annotate("snapshots", 1 + len(partials))

        with trace_span("hydrate") as span:
            dag = build_hydrated_dag(baseline, partials)
            if span:
                span.annotate("targets", len(dag.target_id_to_name))
                span.annotate("edges", dag.edge_count())

        logger.debug(
            "Hydrated DAG from %s plus %d snapshot(s): %d targets",
            baseline_sha,
            len(partials),
            len(dag.target_id_to_name),
        )
        return dag, partials

    @staticmethod
    def _error_result(op: str, exc: Exception) -> ServiceResult:
        """Map a snapshot-store or hydration exception to a failed result."""
        if isinstance(exc, BaselineModeError):
            return ServiceResult.failure(
                op, "INVALID_BASELINE", str(exc), commit=exc.commit_sha, mode=exc.mode
            )
        if isinstance(exc, FailedToFetchCachedTargetsError):
            return ServiceResult.failure(
                op,
                "FETCH_FAILED",
                str(exc),
                failed_shas=exc.failed_shas,
                errors={sha: str(err) for sha, err in exc.errors.items()},
            )
        if isinstance(exc, CachedTargetsNotFoundError):
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), commit=exc.commit_sha)
        if isinstance(exc, InvalidStorageKeyError):
            return ServiceResult.failure(
                op, "INVALID_INPUT", str(exc), commit=exc.commit_sha, key=exc.key
            )
        if isinstance(exc, InvalidCachedTargetsError):
            return ServiceResult.failure(
                op, "INVALID_SNAPSHOT", str(exc), commit=exc.commit_sha, errors=exc.details()
            )
        raise exc
