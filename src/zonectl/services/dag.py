"""DagService — diagnostics for a hydrated DAG.

Surfaces the conditions the closure tolerates silently: targets that
are reachable through edges but were never named (and so never reported
as affected), package names that resolve to several target ids, and
cycles in the merged edge data.
"""

from __future__ import annotations

from collections.abc import Sequence

from zonectl.infrastructure.graph.engine import GraphEngine
from zonectl.services.base import HANDLED_ERRORS, BaseService
from zonectl.services.result import ServiceResult
from zonectl.services.telemetry import trace_span, traced


class DagService(BaseService):
    """Inspects the DAG hydrated from a baseline and PR snapshots."""

    @traced
    def inspect(self, baseline_sha: str, head_shas: Sequence[str] = ()) -> ServiceResult:
        """Report size, unnamed ids, multi-id names, and cycles.

        Cycles and unnamed ids are warnings: the closure stays correct in
        their presence but may report less than is reachable.
        """
        op = "dag_inspect"
        try:
            dag, partials = self._load_dag(baseline_sha, head_shas)
        except HANDLED_ERRORS as exc:
            return self._error_result(op, exc)

        engine = GraphEngine(dag)
        with trace_span("analyze") as span:
            unnamed = engine.unnamed_ids()
            cycle = engine.find_cycle()
            if span:
                span.annotate("nodes", engine.graph.number_of_nodes())

        aliases = {
            name: sorted(ids)
            for name, ids in sorted(dag.name_to_target_ids.items())
            if len(ids) > 1
        }

        warnings: list[str] = []
        if unnamed:
            warnings.append(
                f"{len(unnamed)} target id(s) are referenced by edges but never named; "
                "they are excluded from affected sets"
            )
        if cycle:
            warnings.append(f"Dependency cycle detected: {' -> '.join([*cycle, cycle[0]])}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "baseline_sha": baseline_sha,
                "head_shas": list(head_shas),
                "snapshots": 1 + len(partials),
                "targets": len(dag.target_id_to_name),
                "names": len(dag.name_to_target_ids),
                "edges": dag.edge_count(),
                "unnamed_ids": unnamed,
                "aliases": aliases,
                "cycle": cycle,
            },
            warnings=warnings,
        )
