"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ppdctl.toml only holds overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class CatalogConfig(BaseModel):
    """[catalog] section."""

    model_config = {"frozen": True}

    path: Path | None = None


class RenderConfig(BaseModel):
    """[render] section.

    ``on_failure`` decides what a failed render does to the cached
    texture: ``retain`` keeps the last good image, ``clear`` drops it.
    """

    model_config = {"frozen": True}

    on_failure: Literal["retain", "clear"] = "retain"


class StoreConfig(BaseModel):
    """[store] section.

    ``first_id`` is the first paperdoll id issued. Ids start at 1 or later.
    """

    model_config = {"frozen": True}

    first_id: int = Field(default=1, ge=1)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
