"""Tests for ZoneService and the PR overlap graph."""

from __future__ import annotations

from tests.conftest import (
    BASE_SHA,
    PR1_SHA,
    PR2_SHA,
    PR3_SHA,
    chain_baseline,
    filtered_snapshot,
    store_with,
    target,
)
from zonectl.domain.targets import ComputedTarget, FilteredSnapshot
from zonectl.services.zones import ZoneService, overlap_graph


def _change(head_sha: str, package: str, *, known: bool = True) -> FilteredSnapshot:
    graph = [target(f"{package}#build", package)] if known else []
    return filtered_snapshot(graph, head_sha=head_sha, target_ids=[package])


def _queue() -> ZoneService:
    """PR1 touches utils, PR2 touches backend, PR3 touches docs."""
    return ZoneService(
        store_with(
            chain_baseline(),
            _change(PR1_SHA, "utils"),
            _change(PR2_SHA, "backend"),
            _change(PR3_SHA, "docs"),
        )
    )


class TestOverlapGraph:
    def test_shared_targets_on_edges(self) -> None:
        g = overlap_graph(
            {
                "p1": {ComputedTarget("a", "a"), ComputedTarget("b", "b")},
                "p2": {ComputedTarget("b", "b")},
                "p3": {ComputedTarget("c", "c")},
            }
        )
        assert set(g.nodes) == {"p1", "p2", "p3"}
        assert g.edges["p1", "p2"]["shared"] == {"b"}
        assert not g.has_edge("p1", "p3")

    def test_multiple_shared_targets(self) -> None:
        shared = {ComputedTarget("a", "a"), ComputedTarget("b", "b")}
        g = overlap_graph({"p1": set(shared), "p2": set(shared)})
        assert g.edges["p1", "p2"]["shared"] == {"a", "b"}


class TestZones:
    def test_overlapping_prs_share_a_zone(self) -> None:
        result = _queue().zones(BASE_SHA, [PR1_SHA, PR2_SHA, PR3_SHA])
        assert result.ok
        assert result.data["count"] == 2
        assert result.data["serialized"] == 1
        first, second = result.data["zones"]
        assert first["zone"] == 1
        assert [m["head_sha"] for m in first["members"]] == [PR1_SHA, PR2_SHA]
        assert first["shared"] == ["backend"]
        assert [m["head_sha"] for m in second["members"]] == [PR3_SHA]
        assert second["shared"] == []

    def test_member_affected_sets(self) -> None:
        result = _queue().zones(BASE_SHA, [PR1_SHA, PR2_SHA, PR3_SHA])
        members = {m["head_sha"]: m for z in result.data["zones"] for m in z["members"]}
        assert members[PR1_SHA]["affected"] == ["backend", "frontend", "utils"]
        assert members[PR1_SHA]["affected_count"] == 3
        assert members[PR2_SHA]["affected"] == ["backend"]

    def test_singletons_keep_input_order(self) -> None:
        result = _queue().zones(BASE_SHA, [PR3_SHA, PR2_SHA])
        assert [z["members"][0]["head_sha"] for z in result.data["zones"]] == [PR3_SHA, PR2_SHA]
        assert result.data["serialized"] == 0

    def test_duplicate_heads_collapsed(self) -> None:
        result = _queue().zones(BASE_SHA, [PR3_SHA, PR3_SHA])
        assert result.data["count"] == 1
        assert result.data["zones"][0]["size"] == 1

    def test_new_packages_overlap(self) -> None:
        store = store_with(
            chain_baseline(),
            _change(PR1_SHA, "brand-new", known=False),
            _change(PR2_SHA, "brand-new", known=False),
        )
        result = ZoneService(store).zones(BASE_SHA, [PR1_SHA, PR2_SHA])
        assert result.data["count"] == 1
        assert result.data["zones"][0]["shared"] == ["brand-new"]

    def test_new_packages_excluded(self) -> None:
        store = store_with(
            chain_baseline(),
            _change(PR1_SHA, "brand-new", known=False),
            _change(PR2_SHA, "brand-new", known=False),
        )
        result = ZoneService(store).zones(
            BASE_SHA, [PR1_SHA, PR2_SHA], include_new_packages=False
        )
        assert result.data["count"] == 2
        assert all(z["members"][0]["affected_count"] == 0 for z in result.data["zones"])


class TestZonesErrors:
    def test_no_heads(self) -> None:
        result = _queue().zones(BASE_SHA, [])
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"

    def test_missing_head_snapshot(self) -> None:
        result = ZoneService(store_with(chain_baseline())).zones(BASE_SHA, [PR1_SHA])
        assert result.error is not None
        assert result.error.code == "FETCH_FAILED"
        assert result.error.detail["failed_shas"] == [PR1_SHA]
