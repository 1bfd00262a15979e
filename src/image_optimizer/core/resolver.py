from __future__ import annotations

import logging
from pathlib import Path, PurePath, PurePosixPath
from typing import Callable
from urllib.parse import unquote, urlparse

from image_optimizer.core.downloader import download_image
from image_optimizer.core.errors import DownloadError, EmptyDirectoryError, PathNotFoundError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
URL_SCHEMES = {"http", "https"}

Downloader = Callable[[str, Path], Path]
FileNameCallback = Callable[[str], str | None]


def clean_token(raw: str) -> str:
    token = raw
    if token[:1] in ("'", '"'):
        token = token[1:]
    if token[-1:] in ("'", '"'):
        token = token[:-1]
    return token.strip()


def split_tokens(raw: str) -> list[str]:
    tokens = (clean_token(part) for part in raw.split())
    return [token for token in tokens if token]


def is_url(token: str) -> bool:
    try:
        parsed = urlparse(token)
    except ValueError:
        return False
    return parsed.scheme.lower() in URL_SCHEMES and bool(parsed.netloc)


def url_file_name(url: str) -> str:
    return PurePosixPath(unquote(urlparse(url).path)).name


def _safe_name(name: str | None) -> str:
    if not name:
        return ""
    base = PurePath(name.strip()).name
    return "" if base in (".", "..") else base


def download_target(url: str, download_dir: Path, override: str | None = None) -> Path:
    """Local path a URL is saved to.

    The override name (or the URL basename) is reduced to a bare file name so
    the download stays inside ``download_dir``; when it carries no extension,
    the extension of the URL path is appended.

    Raises:
        DownloadError: Neither the override nor the URL provides a file name.
    """
    url_name = _safe_name(url_file_name(url))
    name = _safe_name(override) or url_name
    if not name:
        raise DownloadError(url, "URL has no file name; provide an output name")
    target = download_dir / name
    if not target.suffix:
        target = target.with_name(target.name + PurePosixPath(url_name).suffix)
    return target


def filter_supported_images(paths: list[Path]) -> list[Path]:
    return [path for path in paths if path.suffix.lower() in SUPPORTED_EXTENSIONS]


def list_directory_images(directory: Path) -> list[Path]:
    entries = [entry for entry in directory.iterdir() if entry.is_file()]
    images = filter_supported_images(entries)
    if not images:
        raise EmptyDirectoryError(directory)
    return images


class PathResolver:
    """Turns one user token into the local image files it stands for."""

    def __init__(
        self,
        download_dir: Path,
        downloader: Downloader = download_image,
        ask_file_name: FileNameCallback | None = None,
    ) -> None:
        self.download_dir = download_dir
        self.downloader = downloader
        self.ask_file_name = ask_file_name

    def resolve(self, token: str) -> list[Path]:
        if is_url(token):
            return [self._download(token)]

        path = Path(token)
        if not path.exists():
            raise PathNotFoundError(token)

        if path.is_dir():
            images = list_directory_images(path)
            logger.info(f"Found {len(images)} image(s) to process in {path}")
            return images

        return [path]

    def _download(self, url: str) -> Path:
        override = self.ask_file_name(url_file_name(url)) if self.ask_file_name else None
        target = download_target(url, self.download_dir, override)

        self.download_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Downloading image from URL: {url}")
        self.downloader(url, target)
        logger.info(f"Image downloaded successfully: {target}")
        return target
