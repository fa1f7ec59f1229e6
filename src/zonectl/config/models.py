"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, zonectl.toml only contains
overrides. A project needs no config file at all to use the local
cache directory layout.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    # Relative paths resolve against the project root (config file parent).
    root: str = ".zonectl/cache"
    prefix: str = "commit-targets"
    batch_size: int = Field(default=50, ge=1)


class ZonesConfig(BaseModel):
    """[zones] section."""

    model_config = {"frozen": True}

    # Count packages unknown to every snapshot when comparing PR affected sets.
    include_new_packages: bool = True
