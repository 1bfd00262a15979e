from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from image_optimizer.core.converter import expected_output_path
from image_optimizer.core.errors import InvalidDimensionsError
from image_optimizer.core.models import CropBox, OutputFormat, TranscodeOptions

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 80
MIN_QUALITY = 0
MAX_QUALITY = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_NUMBER = re.compile(r"^\d+(\.\d+)?$")


def parse_format_choice(raw: str) -> OutputFormat:
    choice = raw.strip().lower()
    if choice in ("", "1", OutputFormat.WEBP.value):
        return OutputFormat.WEBP
    if choice not in ("2", OutputFormat.PNG.value):
        logger.warning(f"Unknown format choice {raw!r}, using png")
    return OutputFormat.PNG


def clamp_quality(value: int) -> int:
    return min(MAX_QUALITY, max(MIN_QUALITY, value))


def parse_quality(raw: str) -> int:
    text = raw.strip()
    if not text:
        return DEFAULT_QUALITY

    match = _LEADING_INT.match(text)
    if match is None:
        logger.warning(f"Quality {raw!r} is not a number, using {DEFAULT_QUALITY}")
        return DEFAULT_QUALITY

    return clamp_quality(int(match.group(1)))


def parse_yes_no(raw: str) -> bool:
    return raw.strip().lower() in ("y", "yes")


def parse_crop_dimensions(raw: str) -> CropBox:
    parts = raw.split()
    if len(parts) != 2 or not all(_NUMBER.match(part) for part in parts):
        raise InvalidDimensionsError(raw)

    width, height = (int(float(part)) for part in parts)
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(raw)

    return CropBox(width=width, height=height)


def build_options(format_choice: str, quality: str, crop: str | None) -> TranscodeOptions:
    return TranscodeOptions(
        output_format=parse_format_choice(format_choice),
        quality=parse_quality(quality),
        crop=parse_crop_dimensions(crop) if crop is not None else None,
    )


def detect_output_conflicts(files: Sequence[Path], options: TranscodeOptions) -> list[Path]:
    return [path for path in (expected_output_path(source, options) for source in files) if path.exists()]


def detect_duplicate_outputs(files: Sequence[Path], options: TranscodeOptions) -> dict[Path, list[Path]]:
    """Outputs that more than one source in the batch would write."""
    sources_by_output: dict[Path, list[Path]] = {}
    for source in files:
        sources_by_output.setdefault(expected_output_path(source, options), []).append(source)
    return {output: sources for output, sources in sources_by_output.items() if len(sources) > 1}
