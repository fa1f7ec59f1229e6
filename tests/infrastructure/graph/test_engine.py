"""Tests for GraphEngine — NetworkX view of a hydrated DAG."""

from __future__ import annotations

import networkx as nx

from tests.conftest import chain_baseline, full_snapshot, target
from zonectl.domain.dag import build_hydrated_dag
from zonectl.infrastructure.graph.engine import GraphEngine


class TestGraphEngine:
    def test_lazy_build(self) -> None:
        engine = GraphEngine(build_hydrated_dag(chain_baseline()))
        assert engine._graph is None
        g = engine.graph
        assert isinstance(g, nx.DiGraph)
        assert engine.graph is g

    def test_edges_point_to_dependents(self) -> None:
        engine = GraphEngine(build_hydrated_dag(chain_baseline()))
        assert engine.graph.has_edge("utils#build", "frontend#build")
        assert engine.graph.has_edge("frontend#build", "backend#build")
        assert not engine.graph.has_edge("frontend#build", "utils#build")

    def test_node_names(self) -> None:
        engine = GraphEngine(build_hydrated_dag(chain_baseline()))
        assert engine.graph.nodes["docs#build"]["name"] == "docs"

    def test_acyclic_chain(self) -> None:
        engine = GraphEngine(build_hydrated_dag(chain_baseline()))
        assert engine.find_cycle() == []

    def test_cycle_detected(self) -> None:
        dag = build_hydrated_dag(
            full_snapshot(
                [
                    target("A", "a", dependencies=["B"]),
                    target("B", "b", dependencies=["A"]),
                ]
            )
        )
        engine = GraphEngine(dag)
        assert sorted(engine.find_cycle()) == ["A", "B"]

    def test_unnamed_ids(self) -> None:
        dag = build_hydrated_dag(
            full_snapshot([target("A", "a", dependents=["ghost", "phantom"])])
        )
        assert GraphEngine(dag).unnamed_ids() == ["ghost", "phantom"]

    def test_no_unnamed_ids(self) -> None:
        assert GraphEngine(build_hydrated_dag(chain_baseline())).unnamed_ids() == []
