"""Conversions between RasterImage and Pillow images."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from ppdctl.domain.catalog import RasterImage


def to_pil(image: RasterImage) -> Image.Image:
    """Wrap a RasterImage as an RGBA Pillow image (copies the buffer)."""
    return Image.frombytes("RGBA", image.size, image.pixels)


def from_pil(image: Image.Image) -> RasterImage:
    """Convert any Pillow image to an RGBA RasterImage."""
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    width, height = rgba.size
    return RasterImage(width=width, height=height, pixels=rgba.tobytes())


def load_image(path: Path) -> RasterImage:
    """Read an image file into a RasterImage."""
    with Image.open(path) as img:
        return from_pil(img)


def save_image(image: RasterImage, path: Path) -> Path:
    """Write *image* to *path*; the format follows the file extension."""
    path.parent.mkdir(parents=True, exist_ok=True)
    to_pil(image).save(path)
    return path
