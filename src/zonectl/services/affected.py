"""AffectedService — affected-package sets for one or more commits."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from zonectl.domain.closure import compute_transitive_targets, resolve_seeds
from zonectl.domain.targets import ComputedTarget, Snapshot
from zonectl.services.base import HANDLED_ERRORS, BaseService
from zonectl.services.result import ServiceResult
from zonectl.services.telemetry import trace_span, traced


def direct_packages_of(snapshots: Sequence[Snapshot]) -> list[str]:
    """Union of the snapshots' directly affected package names, first-seen order."""
    seen: dict[str, None] = {}
    for snapshot in snapshots:
        for name in snapshot.target_ids:
            seen.setdefault(name, None)
    return list(seen)


def target_items(targets: set[ComputedTarget]) -> list[dict[str, Any]]:
    """Serialize computed targets, sorted by name then id."""
    ordered = sorted(targets, key=lambda t: (t.name, t.id))
    return [{"id": t.id, "name": t.name} for t in ordered]


class AffectedService(BaseService):
    """Computes the transitive affected set on top of a hydrated DAG."""

    @traced
    def affected(
        self,
        baseline_sha: str,
        head_shas: Sequence[str] = (),
        *,
        packages: Sequence[str] = (),
    ) -> ServiceResult:
        """Compute every target affected by the changed packages.

        Hydrates the baseline full snapshot with the partial snapshots of
        *head_shas*, in order. When *packages* is empty the seeds are the
        directly affected packages recorded by those partial snapshots.

        Args:
            baseline_sha: Trunk commit holding a full-dag snapshot.
            head_shas: PR commits whose partial snapshots are folded in.
            packages: Directly changed package names (optional).
        """
        op = "affected"
        try:
            dag, partials = self._load_dag(baseline_sha, head_shas)
        except HANDLED_ERRORS as exc:
            return self._error_result(op, exc)

        direct = list(packages) if packages else direct_packages_of(partials)

        with trace_span("closure") as span:
            targets = compute_transitive_targets(direct, dag)
            _seeds, unresolved = resolve_seeds(direct, dag)
            if span:
                span.annotate("seeds", len(direct))
                span.annotate("affected", len(targets))

        warnings: list[str] = []
        if not direct:
            warnings.append("No directly changed packages; the affected set is empty")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "baseline_sha": baseline_sha,
                "head_shas": list(head_shas),
                "direct_packages": direct,
                "count": len(targets),
                "items": target_items(targets),
                "new_packages": sorted(set(unresolved)),
            },
            warnings=warnings,
        )
