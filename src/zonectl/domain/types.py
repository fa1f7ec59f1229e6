"""Snapshot classification enums.

A cached snapshot is either the complete graph of a trunk commit or a
partial graph for a pull request, and is stored under one of two kinds.
"""

from __future__ import annotations

from enum import StrEnum


class SnapshotMode(StrEnum):
    """Graph coverage of a cached snapshot."""

    FULL_DAG = "full-dag"
    FILTERED = "filtered"


class SnapshotKind(StrEnum):
    """Storage kind used to derive a snapshot's storage key."""

    FULL = "full"
    PARTIAL = "partial"
