"""ZoneService — partition queued pull requests into merge-queue zones.

Two PRs whose affected sets share a target must be serialized; PRs in
different zones can merge in parallel. Zones are the connected
components of the "shares an affected target" relation, computed with
NetworkX on an undirected PR graph.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import networkx as nx

from zonectl.domain.closure import compute_transitive_targets
from zonectl.domain.dag import HydratedDag
from zonectl.domain.targets import ComputedTarget
from zonectl.services.base import HANDLED_ERRORS, BaseService
from zonectl.services.result import ServiceResult
from zonectl.services.telemetry import trace_span, traced


def overlap_graph(affected_by_pr: dict[str, set[ComputedTarget]]) -> nx.Graph:
    """Undirected graph of PRs, linked when their affected sets intersect.

    Each edge carries ``shared``: the target ids both endpoints affect.
    """
    g: nx.Graph = nx.Graph()
    prs_by_target: dict[str, list[str]] = {}
    for sha, targets in affected_by_pr.items():
        g.add_node(sha)
        for target in targets:
            prs_by_target.setdefault(target.id, []).append(sha)

    for target_id, shas in prs_by_target.items():
        for i, left in enumerate(shas):
            for right in shas[i + 1 :]:
                if g.has_edge(left, right):
                    g.edges[left, right]["shared"].add(target_id)
                else:
                    g.add_edge(left, right, shared={target_id})
    return g


class ZoneService(BaseService):
    """Groups PRs whose build graphs overlap."""

    @traced
    def zones(
        self,
        baseline_sha: str,
        head_shas: Sequence[str],
        *,
        include_new_packages: bool = True,
    ) -> ServiceResult:
        """Partition *head_shas* into zones of PRs that must merge serially.

        One DAG is hydrated from the baseline and every PR snapshot so that
        renames and new edges from any queued PR are known; each PR is then
        seeded with its own snapshot's directly affected packages.

        Args:
            baseline_sha: Trunk commit holding a full-dag snapshot.
            head_shas: Head commits of the queued PRs.
            include_new_packages: Count packages unknown to every snapshot.
        """
        op = "zones"
        ordered = list(dict.fromkeys(head_shas))
        if not ordered:
            return ServiceResult.failure(
                op, "INVALID_INPUT", "At least one head commit is required"
            )

        try:
            dag, partials = self._load_dag(baseline_sha, ordered)
        except HANDLED_ERRORS as exc:
            return self._error_result(op, exc)

        with trace_span("closure") as span:
            affected_by_pr: dict[str, set[ComputedTarget]] = {}
            for sha, snapshot in zip(ordered, partials, strict=True):
                seeds = self._seeds(snapshot.target_ids, dag, include_new_packages)
                affected_by_pr[sha] = compute_transitive_targets(seeds, dag)
            if span:
                span.annotate("prs", len(ordered))

        with trace_span("partition") as span:
            g = overlap_graph(affected_by_pr)
            components = list(nx.connected_components(g))
            if span:
                span.annotate("zones", len(components))

        position = {sha: i for i, sha in enumerate(ordered)}
        components.sort(key=lambda c: (-len(c), min(position[s] for s in c)))

        zones = [
            self._zone_entry(index, component, g, affected_by_pr, position, dag)
            for index, component in enumerate(components, start=1)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "baseline_sha": baseline_sha,
                "count": len(zones),
                "serialized": sum(1 for z in zones if z["size"] > 1),
                "zones": zones,
            },
        )

    @staticmethod
    def _seeds(names: Sequence[str], dag: HydratedDag, include_new: bool) -> list[str]:
        if include_new:
            return list(names)
        return [n for n in names if n in dag.name_to_target_ids]

    @staticmethod
    def _zone_entry(
        index: int,
        component: set[str],
        g: nx.Graph,
        affected_by_pr: dict[str, set[ComputedTarget]],
        position: dict[str, int],
        dag: HydratedDag,
    ) -> dict[str, Any]:
        members = sorted(component, key=position.__getitem__)
        shared_ids: set[str] = set()
        for _left, _right, shared in g.subgraph(component).edges(data="shared"):
            shared_ids.update(shared)
        shared_names = sorted({dag.target_id_to_name.get(i, i) for i in shared_ids})
        return {
            "zone": index,
            "size": len(members),
            "members": [
                {
                    "head_sha": sha,
                    "affected_count": len(affected_by_pr[sha]),
                    "affected": sorted({t.name for t in affected_by_pr[sha]}),
                }
                for sha in members
            ],
            "shared": shared_names,
        }
