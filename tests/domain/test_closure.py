"""Tests for the transitive closure over a hydrated DAG."""

from __future__ import annotations

from tests.conftest import PR1_SHA, chain_baseline, filtered_snapshot, full_snapshot, target
from zonectl.domain.closure import (
    compute_transitive_targets,
    reachable_target_ids,
    resolve_seeds,
)
from zonectl.domain.dag import build_hydrated_dag
from zonectl.domain.targets import ComputedTarget


def _ids(targets: set[ComputedTarget]) -> set[str]:
    return {t.id for t in targets}


class TestComputeTransitiveTargets:
    def test_chain_is_fully_affected(self) -> None:
        dag = build_hydrated_dag(chain_baseline())
        result = compute_transitive_targets(["utils"], dag)
        assert {t.name for t in result} == {"utils", "frontend", "backend"}
        assert _ids(result) == {"utils#build", "frontend#build", "backend#build"}

    def test_leaf_affects_only_itself(self) -> None:
        dag = build_hydrated_dag(chain_baseline())
        result = compute_transitive_targets(["backend"], dag)
        assert result == {ComputedTarget(id="backend#build", name="backend")}

    def test_unknown_package_passes_through(self) -> None:
        dag = build_hydrated_dag(chain_baseline())
        result = compute_transitive_targets(["brand-new"], dag)
        assert len(result) == 1
        (only,) = result
        assert only.id == "brand-new"
        assert only.name == "brand-new"

    def test_empty_seeds(self) -> None:
        dag = build_hydrated_dag(chain_baseline())
        assert compute_transitive_targets([], dag) == set()

    def test_duplicate_seeds(self) -> None:
        dag = build_hydrated_dag(chain_baseline())
        once = compute_transitive_targets(["frontend"], dag)
        twice = compute_transitive_targets(["frontend", "frontend"], dag)
        assert once == twice

    def test_cycle_terminates(self) -> None:
        baseline = full_snapshot(
            [
                target("A", "a", dependencies=["B"]),
                target("B", "b", dependencies=["A"]),
            ]
        )
        dag = build_hydrated_dag(baseline)
        for seed in ("a", "b"):
            assert _ids(compute_transitive_targets([seed], dag)) == {"A", "B"}

    def test_unnamed_reachable_target_dropped(self) -> None:
        baseline = full_snapshot([target("A", "a", dependents=["ghost"])])
        dag = build_hydrated_dag(baseline)
        assert "ghost" in reachable_target_ids(["A"], dag)
        assert _ids(compute_transitive_targets(["a"], dag)) == {"A"}

    def test_renamed_package_reports_latest_name(self) -> None:
        baseline = full_snapshot([target("T", "old", dependents=["U"]), target("U", "user")])
        rename = filtered_snapshot([target("T", "new")], head_sha=PR1_SHA)
        dag = build_hydrated_dag(baseline, [rename])
        result = compute_transitive_targets(["old"], dag)
        assert {(t.id, t.name) for t in result} == {("T", "new"), ("U", "user")}

    def test_new_edge_from_partial_snapshot(self) -> None:
        partial = filtered_snapshot(
            [target("api#build", "api", dependencies=["utils#build"])], head_sha=PR1_SHA
        )
        dag = build_hydrated_dag(chain_baseline(), [partial])
        assert "api" in {t.name for t in compute_transitive_targets(["utils"], dag)}

    def test_known_and_unknown_mixed(self) -> None:
        dag = build_hydrated_dag(chain_baseline())
        result = compute_transitive_targets(["backend", "brand-new"], dag)
        assert _ids(result) == {"backend#build", "brand-new"}


class TestResolveSeeds:
    def test_splits_known_and_unknown(self) -> None:
        dag = build_hydrated_dag(chain_baseline())
        seeds, unresolved = resolve_seeds(["utils", "nope"], dag)
        assert seeds == ["utils#build"]
        assert unresolved == ["nope"]

    def test_one_name_seeds_every_id(self) -> None:
        dag = build_hydrated_dag(
            full_snapshot([target("web#test", "web"), target("web#build", "web")])
        )
        seeds, _ = resolve_seeds(["web"], dag)
        assert seeds == ["web#build", "web#test"]


class TestComputedTarget:
    def test_equality_ignores_name(self) -> None:
        assert ComputedTarget(id="x", name="a") == ComputedTarget(id="x", name="b")
        assert len({ComputedTarget(id="x", name="a"), ComputedTarget(id="x", name="b")}) == 1

    def test_different_ids_differ(self) -> None:
        assert ComputedTarget(id="x", name="a") != ComputedTarget(id="y", name="a")
