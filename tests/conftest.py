"""Shared pytest fixtures for ppdctl tests.

The scenario catalog used throughout:

Doll 0 "Scenario" (4x4), slots [1, 2]
  slot 1  required  candidates [1, 2]
  slot 2  optional  candidates [3, 4]
Doll 1 "Cycler" (4x4), slots [3, 4, 5, 6]
  slot 3  optional  candidates [5, 6, 7]
  slot 4  required  candidates [5, 6, 7]
  slot 5  required  no candidates
  slot 6  optional  no candidates
Slot 7 optional [1] belongs to no doll.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from PIL import Image

from ppdctl.domain.catalog import Doll, Fragment, PaperdollView, RasterImage, Slot
from ppdctl.domain.errors import RenderError
from ppdctl.infrastructure.catalog import MemoryCatalog
from ppdctl.services.store import PaperdollStore


def solid(width: int, height: int, rgba: tuple[int, int, int, int]) -> RasterImage:
    """A single-colour RasterImage."""
    return RasterImage(width=width, height=height, pixels=bytes(rgba) * (width * height))


def _scenario_parts() -> tuple[list[Doll], list[Slot], list[Fragment]]:
    dolls = [
        Doll(id=0, desc="Scenario", width=4, height=4, slots=(1, 2)),
        Doll(id=1, desc="Cycler", width=4, height=4, slots=(3, 4, 5, 6)),
    ]
    slots = [
        Slot(id=1, desc="Body", required=True, z=0, candidates=(1, 2)),
        Slot(id=2, desc="Hat", required=False, z=1, position=(2, 2), candidates=(3, 4)),
        Slot(id=3, desc="Optional ABC", candidates=(5, 6, 7)),
        Slot(id=4, desc="Required ABC", required=True, candidates=(5, 6, 7)),
        Slot(id=5, desc="Required none", required=True),
        Slot(id=6, desc="Optional none"),
        Slot(id=7, desc="Orphan", candidates=(1,)),
    ]
    fragments = [
        Fragment(id=1, desc="F1", image=solid(4, 4, (255, 0, 0, 255))),
        Fragment(id=2, desc="F2", image=solid(4, 4, (0, 255, 0, 255))),
        Fragment(id=3, desc="F3", image=solid(2, 2, (0, 0, 255, 255))),
        Fragment(id=4, desc="F4", image=solid(2, 2, (255, 255, 0, 255))),
        Fragment(id=5, desc="A"),
        Fragment(id=6, desc="B"),
        Fragment(id=7, desc="C"),
    ]
    return dolls, slots, fragments


class FlakyCatalog(MemoryCatalog):
    """MemoryCatalog whose render can be switched to fail."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fail_with: Exception | None = None
        self.render_calls = 0

    def render(self, view: PaperdollView) -> RasterImage:
        self.render_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return super().render(view)

    def break_render(self, exc: Exception | None = None) -> None:
        self.fail_with = exc or RenderError("renderer offline")


@pytest.fixture
def catalog() -> FlakyCatalog:
    """The scenario catalog, rendering normally until told otherwise."""
    dolls, slots, fragments = _scenario_parts()
    return FlakyCatalog(dolls=dolls, slots=slots, fragments=fragments)


@pytest.fixture
def store(catalog: FlakyCatalog) -> PaperdollStore:
    return PaperdollStore(catalog)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """A catalog TOML mirroring doll 0 of the scenario, with PNG layers."""
    art = tmp_path / "art"
    art.mkdir()
    Image.new("RGBA", (4, 4), (255, 0, 0, 255)).save(art / "f1.png")
    Image.new("RGBA", (4, 4), (0, 255, 0, 255)).save(art / "f2.png")
    Image.new("RGBA", (2, 2), (0, 0, 255, 255)).save(art / "f3.png")
    Image.new("RGB", (2, 2), (255, 255, 0)).save(art / "f4.png")

    path = tmp_path / "catalog.toml"
    path.write_text(
        """\
[[dolls]]
id = 0
desc = "Scenario"
width = 4
height = 4
slots = [1, 2]

[[slots]]
id = 1
desc = "Body"
required = true
candidates = [1, 2]

[[slots]]
id = 2
desc = "Hat"
z = 1
position = [2, 2]
candidates = [3, 4]

[[fragments]]
id = 1
desc = "F1"
image = "art/f1.png"

[[fragments]]
id = 2
desc = "F2"
image = "art/f2.png"

[[fragments]]
id = 3
desc = "F3"
image = "art/f3.png"

[[fragments]]
id = 4
desc = "F4"
image = "art/f4.png"
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path]:
    """Run with CWD at a temp dir and no config env override."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PPDCTL_CONFIG", raising=False)
    yield tmp_path
