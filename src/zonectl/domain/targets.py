"""Cached build-target snapshot models (wire schema version 2).

Snapshots are written per commit by CI and read back to hydrate the
dependency graph. Wire field names are camelCase; Python attributes are
snake_case. Both spellings are accepted on input.

INVARIANT: ``target_id`` is stable across snapshots. ``target_name`` is a
display attribute that may change between snapshots (package renames).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

SNAPSHOT_VERSION = 2

_WIRE_CONFIG: dict[str, Any] = {
    "frozen": True,
    "populate_by_name": True,
    "alias_generator": to_camel,
}


class TargetInfo(BaseModel):
    """Identifying information for a build target."""

    model_config = _WIRE_CONFIG

    # e.g. "@acme/server#build"
    target_id: str
    # e.g. "@acme/server"
    target_name: str | None = None


class Target(BaseModel):
    """A node of a snapshot graph with its declared edges.

    ``dependencies`` and ``dependents`` are declared independently and are
    not guaranteed to agree with each other across snapshots.
    """

    model_config = _WIRE_CONFIG

    target: TargetInfo
    dependencies: list[str]
    dependents: list[str]

    @property
    def target_id(self) -> str:
        return self.target.target_id

    @property
    def target_name(self) -> str | None:
        return self.target.target_name


class FullDagSnapshot(BaseModel):
    """Complete dependency graph as of a trunk commit."""

    model_config = _WIRE_CONFIG

    version: Literal[2]
    mode: Literal["full-dag"] = "full-dag"
    head_sha: str
    target_ids: list[str]
    graph: list[Target]


class FilteredSnapshot(BaseModel):
    """Partial graph covering the directly affected targets of a PR commit."""

    model_config = _WIRE_CONFIG

    version: Literal[2]
    mode: Literal["filtered"] = "filtered"
    base_sha: str
    head_sha: str
    target_ids: list[str]
    graph: list[Target]


Snapshot = FullDagSnapshot | FilteredSnapshot

CachedBuildTargets = Annotated[
    Snapshot,
    Field(discriminator="mode"),
]

_SNAPSHOT_ADAPTER: TypeAdapter[Snapshot] = TypeAdapter(CachedBuildTargets)


def parse_snapshot(data: Any) -> Snapshot:
    """Validate decoded JSON into a snapshot.

    Raises:
        pydantic.ValidationError: If *data* does not match the schema.
    """
    return _SNAPSHOT_ADAPTER.validate_python(data)


def parse_snapshot_json(raw: str | bytes) -> Snapshot:
    """Decode and validate a JSON document into a snapshot.

    Raises:
        json.JSONDecodeError: If *raw* is not JSON.
        pydantic.ValidationError: If the document does not match the schema.
    """
    text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    return parse_snapshot(json.loads(text))


def dump_snapshot(snapshot: Snapshot) -> dict[str, Any]:
    """Serialize a snapshot to its camelCase wire shape."""
    return snapshot.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ComputedTarget:
    """An affected target: stable id plus its best-known display name.

    Equality and hashing use ``id`` only, so a set of computed targets
    holds each identity once regardless of name.
    """

    id: str
    name: str = field(compare=False)
