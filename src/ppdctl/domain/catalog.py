"""Catalog types and the Catalog collaborator contract.

Dolls, slots, and fragments are immutable catalog definitions. The store
never builds or changes them; it only looks them up by id and asks the
catalog to render a :class:`PaperdollView` into a :class:`RasterImage`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field, model_validator

BYTES_PER_PIXEL = 4  # RGBA8


class RasterImage(BaseModel):
    """A tightly packed RGBA8 pixel buffer."""

    model_config = {"frozen": True}

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    pixels: bytes = b""

    @model_validator(mode="after")
    def _check_buffer_size(self) -> RasterImage:
        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.pixels) != expected:
            msg = (
                f"Pixel buffer holds {len(self.pixels)} bytes, "
                f"expected {expected} for {self.width}x{self.height} RGBA"
            )
            raise ValueError(msg)
        return self

    @classmethod
    def blank(cls, width: int, height: int) -> RasterImage:
        """Fully transparent image of the given size."""
        return cls(width=width, height=height, pixels=bytes(width * height * BYTES_PER_PIXEL))

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


class Fragment(BaseModel):
    """A visual layer usable in one or more slots."""

    model_config = {"frozen": True}

    id: int = Field(ge=0)
    desc: str = ""
    image: RasterImage | None = None


class Slot(BaseModel):
    """An attachment point on a doll.

    ``candidates`` order is significant: it is the cycling order and its
    first entry is the default for required slots. A fragment may appear
    in it at most once.
    """

    model_config = {"frozen": True}

    id: int = Field(ge=0)
    desc: str = ""
    required: bool = False
    z: int = 0
    position: tuple[int, int] = (0, 0)
    candidates: tuple[int, ...] = ()

    @model_validator(mode="after")
    def _check_unique_candidates(self) -> Slot:
        seen: set[int] = set()
        for fragment_id in self.candidates:
            if fragment_id in seen:
                msg = f"Slot {self.id} lists fragment {fragment_id} more than once"
                raise ValueError(msg)
            seen.add(fragment_id)
        return self


class Doll(BaseModel):
    """Base figure exposing an ordered set of slots."""

    model_config = {"frozen": True}

    id: int = Field(ge=0)
    desc: str = ""
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    slots: tuple[int, ...] = ()
    image: RasterImage | None = None


class PaperdollView(BaseModel):
    """Read-only snapshot of a paperdoll handed to the renderer."""

    model_config = {"frozen": True}

    doll_id: int
    slot_map: dict[int, int] = Field(default_factory=dict)


@runtime_checkable
class Catalog(Protocol):
    """Read-only template provider and compositor.

    ``render`` raises :class:`ppdctl.domain.errors.RenderError` when it
    cannot produce an image.
    """

    def lookup_doll(self, doll_id: int) -> Doll | None: ...

    def lookup_slot(self, slot_id: int) -> Slot | None: ...

    def lookup_fragment(self, fragment_id: int) -> Fragment | None: ...

    def dolls(self) -> Iterable[Doll]: ...

    def render(self, view: PaperdollView) -> RasterImage: ...
