"""Catalog definition loading from TOML.

A catalog file holds three arrays of tables::

    [[dolls]]
    id = 0
    desc = "Base"
    width = 64
    height = 64
    slots = [1, 2]
    image = "base.png"        # optional, relative to the catalog file

    [[slots]]
    id = 1
    desc = "Hair"
    required = true
    z = 1
    position = [0, 0]
    candidates = [10, 11]

    [[fragments]]
    id = 10
    desc = "Short"
    image = "hair/short.png"  # optional

Images are read with Pillow and stored as RGBA.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from ppdctl.domain.catalog import Doll, Fragment, RasterImage, Slot
from ppdctl.infrastructure.catalog import MemoryCatalog
from ppdctl.infrastructure.images import load_image


class CatalogLoadError(Exception):
    """The catalog file is missing, malformed, or inconsistent."""


class DollDef(BaseModel):
    id: int = Field(ge=0)
    desc: str = ""
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    slots: list[int] = Field(default_factory=list)
    image: str | None = None


class FragmentDef(BaseModel):
    id: int = Field(ge=0)
    desc: str = ""
    image: str | None = None


class CatalogFile(BaseModel):
    """Validated contents of a catalog TOML file."""

    dolls: list[DollDef] = Field(default_factory=list)
    slots: list[Slot] = Field(default_factory=list)
    fragments: list[FragmentDef] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> CatalogFile:
        slot_ids = {slot.id for slot in self.slots}
        fragment_ids = {fragment.id for fragment in self.fragments}
        errors: list[str] = []
        for doll in self.dolls:
            errors.extend(
                f"doll {doll.id} references unknown slot {slot_id}"
                for slot_id in doll.slots
                if slot_id not in slot_ids
            )
        for slot in self.slots:
            errors.extend(
                f"slot {slot.id} references unknown fragment {fragment_id}"
                for fragment_id in slot.candidates
                if fragment_id not in fragment_ids
            )
        if errors:
            raise ValueError("; ".join(errors))
        return self


def load_catalog(path: Path) -> MemoryCatalog:
    """Read *path* and build a MemoryCatalog.

    Raises:
        CatalogLoadError: On unreadable files, invalid TOML, schema
            violations, dangling references, or unreadable images.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read catalog {path}: {exc}"
        raise CatalogLoadError(msg) from exc

    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise CatalogLoadError(msg) from exc

    try:
        definition = CatalogFile.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid catalog {path}: {exc}"
        raise CatalogLoadError(msg) from exc

    base = path.parent
    dolls = [
        Doll(
            id=d.id,
            desc=d.desc,
            width=d.width,
            height=d.height,
            slots=tuple(d.slots),
            image=_read_image(base, d.image),
        )
        for d in definition.dolls
    ]
    fragments = [
        Fragment(id=f.id, desc=f.desc, image=_read_image(base, f.image))
        for f in definition.fragments
    ]
    try:
        return MemoryCatalog(dolls=dolls, slots=definition.slots, fragments=fragments)
    except ValueError as exc:
        msg = f"Invalid catalog {path}: {exc}"
        raise CatalogLoadError(msg) from exc


def _read_image(base: Path, relative: str | None) -> RasterImage | None:
    if relative is None:
        return None
    image_path = base / relative
    try:
        return load_image(image_path)
    except OSError as exc:
        msg = f"Cannot read image {image_path}: {exc}"
        raise CatalogLoadError(msg) from exc
