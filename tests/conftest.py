"""Shared fixtures for the image optimizer tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a small solid-colour image to disk."""

    def _make(
        name: str,
        size: tuple[int, int] = (64, 32),
        color: tuple[int, ...] = (200, 40, 40),
        mode: str = "RGB",
        directory: Path | None = None,
    ) -> Path:
        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        Image.new(mode, size, color).save(path)
        return path

    return _make


@pytest.fixture
def photo_dir(tmp_path: Path, make_image: Callable[..., Path]) -> Path:
    """Directory holding two images and one unrelated text file."""
    directory = tmp_path / "photos"
    make_image("a.jpg", directory=directory)
    make_image("c.png", directory=directory)
    (directory / "b.txt").write_text("not an image")
    return directory
