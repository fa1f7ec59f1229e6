"""Graph hydration — fold a baseline and incremental snapshots into one DAG.

Pure functions, no I/O. The baseline must be a full-dag snapshot; the
additional snapshots (usually filtered, one per queued PR) are folded in
order on top of it.

Merge rules per folded snapshot:
- Names: the most recently folded snapshot wins. Old aliases stay in
  ``name_to_target_ids`` so PRs still referencing a pre-rename package
  name keep resolving.
- Edges: set union of declared ``dependents`` plus the reverse of every
  declared ``dependency``. Edges are never removed, so the result does
  not depend on the order of the additional snapshots.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from zonectl.domain.targets import Snapshot, Target
from zonectl.domain.types import SnapshotMode


class BaselineModeError(ValueError):
    """Raised when hydration is asked to start from a non full-dag snapshot."""

    def __init__(self, commit_sha: str, mode: str) -> None:
        self.commit_sha = commit_sha
        self.mode = mode
        super().__init__(
            f"Baseline commit {commit_sha} must have {SnapshotMode.FULL_DAG} mode, got {mode}"
        )


def fallback_label(target_id: str) -> str:
    """Display name for a target whose snapshot carries no name."""
    return target_id


@dataclass
class HydratedDag:
    """Merged reverse-edge adjacency plus id/name lookup tables."""

    target_id_to_dependent_ids: dict[str, set[str]] = field(default_factory=dict)
    target_id_to_name: dict[str, str] = field(default_factory=dict)
    name_to_target_ids: dict[str, set[str]] = field(default_factory=dict)

    def fold_snapshot(self, snapshot: Snapshot) -> None:
        """Merge one snapshot's names and edges into this DAG in place."""
        for node in snapshot.graph:
            self._record_name(node)
            self._record_edges(node)

    def _record_name(self, node: Target) -> None:
        name = node.target_name or fallback_label(node.target_id)
        self.target_id_to_name[node.target_id] = name
        self.name_to_target_ids.setdefault(name, set()).add(node.target_id)

    def _record_edges(self, node: Target) -> None:
        dependents = self.target_id_to_dependent_ids.setdefault(node.target_id, set())
        dependents.update(node.dependents)
        for dependency_id in node.dependencies:
            self.target_id_to_dependent_ids.setdefault(dependency_id, set()).add(node.target_id)

    def dependents_of(self, target_id: str) -> frozenset[str]:
        return frozenset(self.target_id_to_dependent_ids.get(target_id, ()))

    def edge_count(self) -> int:
        return sum(len(ids) for ids in self.target_id_to_dependent_ids.values())

    def referenced_ids(self) -> set[str]:
        """Every target id that appears as a node or on either end of an edge."""
        ids = set(self.target_id_to_dependent_ids)
        for dependent_ids in self.target_id_to_dependent_ids.values():
            ids.update(dependent_ids)
        ids.update(self.target_id_to_name)
        return ids


def build_hydrated_dag(
    baseline: Snapshot,
    additional: Iterable[Snapshot] = (),
) -> HydratedDag:
    """Build a hydrated DAG from a full baseline and ordered incremental snapshots.

    Args:
        baseline: Full-dag snapshot of the trunk commit.
        additional: Snapshots folded after the baseline, in order.

    Raises:
        BaselineModeError: If *baseline* is not a full-dag snapshot.
    """
    if baseline.mode != SnapshotMode.FULL_DAG:
        raise BaselineModeError(baseline.head_sha, baseline.mode)

    dag = HydratedDag()
    for snapshot in (baseline, *additional):
        dag.fold_snapshot(snapshot)
    return dag

