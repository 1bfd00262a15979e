from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageOps

from image_optimizer.core.errors import TranscodeError
from image_optimizer.core.metadata import extract_image_meta, read_image_meta
from image_optimizer.core.models import CropBox, OutputFormat, TranscodeOptions, TranscodeResult

PNG_PALETTE_COLORS = 256


def cover_fit(image: Image.Image, crop: CropBox) -> Image.Image:
    """Scale to cover the crop box, then trim the centred excess."""
    return ImageOps.fit(
        image,
        (max(1, crop.width), max(1, crop.height)),
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (image.mode == "P" and "transparency" in image.info)


def _normalize_mode(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "RGBA"):
        return image
    return image.convert("RGBA" if _has_alpha(image) else "RGB")


class PillowTranscoder:
    def transcode(self, source_path: Path, output_path: Path, options: TranscodeOptions) -> TranscodeResult:
        try:
            with Image.open(source_path) as image:
                original = extract_image_meta(image, source_path)
                image.load()
                prepared = _normalize_mode(image)
                if options.crop is not None:
                    prepared = cover_fit(prepared, options.crop)
                self._save(prepared, output_path, options)

            optimized = read_image_meta(output_path)
        except (OSError, ValueError, Image.DecompressionBombError) as error:
            raise TranscodeError(source_path, error) from error

        return TranscodeResult(output_path=output_path, original=original, optimized=optimized)

    def _save(self, image: Image.Image, output_path: Path, options: TranscodeOptions) -> None:
        if options.output_format is OutputFormat.WEBP:
            image.save(output_path, format="WEBP", quality=options.quality, method=6)
            return

        if options.quality < 100:
            method = Image.Quantize.FASTOCTREE if image.mode == "RGBA" else Image.Quantize.MEDIANCUT
            image = image.quantize(colors=PNG_PALETTE_COLORS, method=method)
        image.save(output_path, format="PNG", optimize=True)
