"""Build-tool adapters — project foreign task graphs onto snapshot targets.

Turborepo is the only supported tool. A ``turbo run <task> --dry=json``
document lists every task with its dependency and dependent task ids;
each task becomes one snapshot target owned by its package.

Pure field projections, no graph logic.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from zonectl.domain.targets import (
    SNAPSHOT_VERSION,
    FilteredSnapshot,
    FullDagSnapshot,
    Snapshot,
    Target,
    TargetInfo,
)

# Turbo's pseudo-package for tasks defined at the workspace root.
ROOT_WORKSPACE_PACKAGE = "//"


class BuildTask(BaseModel):
    """Build-tool agnostic task record."""

    model_config = {"frozen": True, "populate_by_name": True}

    task_id: str = Field(alias="taskId")
    task: str  # e.g. "build", "test"
    package: str  # e.g. "@acme/server"
    dependencies: list[str] = Field(default_factory=list)
    dependents: list[str] = Field(default_factory=list)


class TurboTask(BaseModel):
    """Task entry of a Turborepo dry-run document."""

    model_config = {"frozen": True, "populate_by_name": True}

    task_id: str = Field(alias="taskId")
    task: str
    package: str
    hash: str | None = None
    inputs: dict[str, str] | None = None
    dependencies: list[str] = Field(default_factory=list)
    dependents: list[str] = Field(default_factory=list)
    directory: str | None = None


class TurboDryRun(BaseModel):
    """The subset of ``turbo run --dry=json`` output zonectl reads."""

    model_config = {"frozen": True}

    tasks: list[TurboTask] = Field(default_factory=list)


def turbo_task_to_build_task(turbo_task: TurboTask) -> BuildTask:
    """Convert a Turbo task to the build-tool agnostic task format."""
    return BuildTask(
        task_id=turbo_task.task_id,
        task=turbo_task.task,
        package=turbo_task.package,
        dependencies=list(turbo_task.dependencies),
        dependents=list(turbo_task.dependents),
    )


def build_task_to_target(task: BuildTask) -> Target:
    """Project a task onto a snapshot target named after its package."""
    return Target(
        target=TargetInfo(target_id=task.task_id, target_name=task.package),
        dependencies=list(task.dependencies),
        dependents=list(task.dependents),
    )


def snapshot_from_turbo_dry_run(
    document: dict[str, Any],
    *,
    head_sha: str,
    base_sha: str | None = None,
) -> Snapshot:
    """Assemble a snapshot from a decoded Turbo dry-run document.

    Produces a full-dag snapshot when *base_sha* is None (trunk commits)
    and a filtered snapshot otherwise (PR commits, typically from a
    ``--filter=...[base]`` dry run).

    Raises:
        pydantic.ValidationError: If *document* is not a Turbo dry run.
    """
    dry_run = TurboDryRun.model_validate(document)
    build_tasks = [turbo_task_to_build_task(t) for t in dry_run.tasks]
    graph = [build_task_to_target(t) for t in build_tasks]
    packages = sorted({t.package for t in build_tasks if t.package != ROOT_WORKSPACE_PACKAGE})

    if base_sha is None:
        return FullDagSnapshot(
            version=SNAPSHOT_VERSION,
            head_sha=head_sha,
            target_ids=packages,
            graph=graph,
        )
    return FilteredSnapshot(
        version=SNAPSHOT_VERSION,
        base_sha=base_sha,
        head_sha=head_sha,
        target_ids=packages,
        graph=graph,
    )
