"""Transitive closure — every target affected by a set of changed packages.

Walks "depended-on-by" edges breadth-first from the targets of the
directly changed packages. Total: never raises, tolerates cycles and
unknown package names.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from zonectl.domain.dag import HydratedDag
from zonectl.domain.targets import ComputedTarget


def resolve_seeds(
    direct_package_names: Iterable[str],
    hydrated_dag: HydratedDag,
) -> tuple[list[str], list[str]]:
    """Split package names into seed target ids and names absent from the DAG.

    One name may resolve to several target ids (several tasks per package,
    or an alias kept after a rename).
    """
    seed_ids: list[str] = []
    unresolved: list[str] = []
    for name in direct_package_names:
        target_ids = hydrated_dag.name_to_target_ids.get(name)
        if target_ids:
            seed_ids.extend(sorted(target_ids))
        else:
            unresolved.append(name)
    return seed_ids, unresolved


def reachable_target_ids(seed_ids: Iterable[str], hydrated_dag: HydratedDag) -> set[str]:
    """Breadth-first walk over dependents; each target is visited once."""
    adjacency = hydrated_dag.target_id_to_dependent_ids
    visited: set[str] = set()
    queue: deque[str] = deque(seed_ids)

    while queue:
        target_id = queue.popleft()
        if target_id in visited:
            continue
        visited.add(target_id)
        for dependent_id in adjacency.get(target_id, ()):
            if dependent_id not in visited:
                queue.append(dependent_id)

    return visited


def compute_transitive_targets(
    direct_package_names: Iterable[str],
    hydrated_dag: HydratedDag,
) -> set[ComputedTarget]:
    """Compute the affected set (direct packages plus transitive dependents).

    Reachable target ids with no recorded name are left out of the result.
    Package names absent from the DAG are passed through as
    ``ComputedTarget(id=name, name=name)`` since a brand-new package has no
    cached edges yet but is still affected.
    """
    seed_ids, unresolved = resolve_seeds(direct_package_names, hydrated_dag)

    targets: set[ComputedTarget] = set()
    for target_id in reachable_target_ids(seed_ids, hydrated_dag):
        name = hydrated_dag.target_id_to_name.get(target_id)
        if name:
            targets.add(ComputedTarget(id=target_id, name=name))

    for name in unresolved:
        targets.add(ComputedTarget(id=name, name=name))

    return targets
