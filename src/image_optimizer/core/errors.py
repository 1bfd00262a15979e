from __future__ import annotations

from pathlib import Path


class ImageOptimizerError(Exception):
    """Base class for every error raised by the optimizer."""


class PathNotFoundError(ImageOptimizerError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Path does not exist: {token}")
        self.token = token


class DownloadError(ImageOptimizerError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to download image from {url}: {reason}")
        self.url = url
        self.reason = reason


class EmptyDirectoryError(ImageOptimizerError):
    def __init__(self, directory: Path) -> None:
        super().__init__(f"No image files found in the directory: {directory}")
        self.directory = directory


class InvalidDimensionsError(ImageOptimizerError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid dimensions {raw!r}. Please provide two positive numbers, e.g. \"800 600\".")
        self.raw = raw


class TranscodeError(ImageOptimizerError):
    def __init__(self, source_path: Path, cause: BaseException) -> None:
        super().__init__(f"Error processing {source_path.name}: {cause}")
        self.source_path = source_path
        self.cause = cause
