"""GraphEngine — lazy-built NetworkX view of a hydrated DAG.

Edges point from a target to its dependents (the direction affected-set
traversal follows). Built per invocation, no cross-invocation cache.
Only diagnostics need it; affected-set computation works on the
hydrated mappings directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

import networkx as nx

if TYPE_CHECKING:
    from zonectl.domain.dag import HydratedDag

_Graph: TypeAlias = nx.DiGraph


class GraphEngine:
    """Lazy-loading graph view backed by a hydrated DAG."""

    def __init__(self, dag: HydratedDag) -> None:
        self._dag = dag
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it from the DAG on first access."""
        if self._graph is None:
            self._graph = self._build_from_dag()
        return self._graph

    def _build_from_dag(self) -> _Graph:
        """Build a DiGraph from the dependents adjacency.

        Every referenced id becomes a node (so ids that only appear as
        edge endpoints are visible too); ``name`` is set only for ids the
        snapshots named.
        """
        g: _Graph = nx.DiGraph()
        for target_id in self._dag.referenced_ids():
            name = self._dag.target_id_to_name.get(target_id)
            if name is None:
                g.add_node(target_id)
            else:
                g.add_node(target_id, name=name)

        for target_id, dependent_ids in self._dag.target_id_to_dependent_ids.items():
            for dependent_id in dependent_ids:
                g.add_edge(target_id, dependent_id)
        return g

    def find_cycle(self) -> list[str]:
        """Return the target ids of one cycle, or an empty list if acyclic."""
        try:
            edges = nx.find_cycle(self.graph)
        except nx.NetworkXNoCycle:
            return []
        return [source for source, _target in edges]

    def unnamed_ids(self) -> list[str]:
        """Ids reachable through edges that no snapshot ever named."""
        return sorted(n for n, attrs in self.graph.nodes(data=True) if "name" not in attrs)
