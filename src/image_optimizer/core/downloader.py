from __future__ import annotations

import logging
from pathlib import Path

import requests

from image_optimizer.core.errors import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def download_image(
    url: str,
    destination: Path,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> Path:
    """Fetch ``url`` and write the response body to ``destination``.

    Args:
        url: Remote image address.
        destination: File to create or overwrite.
        timeout: Seconds to wait for connect and for each read.
        session: Optional session to reuse connections across downloads.

    Returns:
        The destination path.

    Raises:
        DownloadError: The request failed or the server did not answer with a
            success status.
    """
    getter = session.get if session is not None else requests.get
    logger.debug(f"GET {url} (timeout={timeout}s)")

    try:
        response = getter(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise DownloadError(url, str(e)) from e

    if not response.ok:
        reason = f"{response.status_code} {response.reason}".strip()
        raise DownloadError(url, reason)

    destination.write_bytes(response.content)
    logger.debug(f"Saved {len(response.content)} bytes to {destination}")
    return destination
