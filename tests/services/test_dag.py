"""Tests for DagService diagnostics."""

from __future__ import annotations

from tests.conftest import (
    BASE_SHA,
    PR1_SHA,
    chain_baseline,
    filtered_snapshot,
    full_snapshot,
    store_with,
    target,
)
from zonectl.services.dag import DagService


class TestInspect:
    def test_clean_dag(self) -> None:
        result = DagService(store_with(chain_baseline())).inspect(BASE_SHA)
        assert result.ok
        assert result.data["snapshots"] == 1
        assert result.data["targets"] == 4
        assert result.data["names"] == 4
        assert result.data["edges"] == 2
        assert result.data["unnamed_ids"] == []
        assert result.data["aliases"] == {}
        assert result.data["cycle"] == []
        assert result.warnings == []

    def test_rename_reported_as_alias(self) -> None:
        baseline = full_snapshot([target("T", "old"), target("U", "old")])
        rename = filtered_snapshot([target("T", "new")], head_sha=PR1_SHA)
        result = DagService(store_with(baseline, rename)).inspect(BASE_SHA, [PR1_SHA])
        assert result.data["snapshots"] == 2
        assert result.data["aliases"] == {"old": ["T", "U"]}

    def test_unnamed_ids_warn(self) -> None:
        baseline = full_snapshot([target("A", "a", dependents=["ghost"])])
        result = DagService(store_with(baseline)).inspect(BASE_SHA)
        assert result.data["unnamed_ids"] == ["ghost"]
        assert any("never named" in w for w in result.warnings)

    def test_cycle_warns(self) -> None:
        baseline = full_snapshot(
            [target("A", "a", dependencies=["B"]), target("B", "b", dependencies=["A"])]
        )
        result = DagService(store_with(baseline)).inspect(BASE_SHA)
        assert sorted(result.data["cycle"]) == ["A", "B"]
        assert any("cycle" in w for w in result.warnings)

    def test_missing_baseline(self) -> None:
        result = DagService(store_with()).inspect(BASE_SHA)
        assert result.op == "dag_inspect"
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
