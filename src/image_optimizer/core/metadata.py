from __future__ import annotations

from pathlib import Path

from PIL import Image

from image_optimizer.core.models import ImageMeta


def _format_tag(image: Image.Image, path: Path) -> str:
    if image.format:
        return image.format.lower()
    return path.suffix.lstrip(".").lower() or "unknown"


def extract_image_meta(image: Image.Image, path: Path) -> ImageMeta:
    return ImageMeta(
        byte_size=path.stat().st_size,
        width=image.width,
        height=image.height,
        format=_format_tag(image, path),
    )


def read_image_meta(path: Path) -> ImageMeta:
    with Image.open(path) as image:
        return extract_image_meta(image, path)
