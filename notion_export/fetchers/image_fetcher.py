"""
Download of remote images into the local images directory.

Notion serves uploaded files from short-lived signed S3 URLs, so every
image referenced by an exported page is copied locally during the export.
"""

from __future__ import annotations

import os
from typing import Iterable, Optional
from urllib.parse import urlparse

import requests

CHUNK_SIZE = 64 * 1024


def image_extension(url: str) -> str:
    """
    Extension of the file named by ``url``, query string excluded.

    >>> image_extension("https://s3.example.com/a/photo.PNG?X-Amz-Expires=3600")
    '.PNG'
    >>> image_extension("https://example.com/no-extension")
    ''
    """
    path = urlparse(url.split("?")[0]).path
    return os.path.splitext(path)[1]


def ensure_output_dirs(paths: Iterable[str]) -> None:
    """Create each directory in ``paths`` if it does not exist yet."""
    for path in paths:
        os.makedirs(path, exist_ok=True)


def download_image(url: str, file_path: str, *, timeout: Optional[float] = None) -> str:
    """
    Stream the body of ``url`` into ``file_path``.

    The parent directory must already exist; it is created once per run by
    :func:`ensure_output_dirs`.

    :param url: The remote image URL.
    :param file_path: Destination path, overwritten if present.
    :param timeout: Optional socket timeout in seconds; ``None`` waits forever.
    :return: ``file_path``.
    :raises requests.HTTPError: if the server answers with an error status.
    :raises OSError: if the file cannot be written.
    """
    with requests.get(url, stream=True, timeout=timeout) as resp:
        resp.raise_for_status()
        with open(file_path, "wb") as f:
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
    return file_path
