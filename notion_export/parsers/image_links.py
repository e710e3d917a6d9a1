from __future__ import annotations

import os
import re
from typing import Any, Callable, List

from notion_export.fetchers.image_fetcher import image_extension

# Plain pattern scan, not a markdown parse: only https:// targets qualify.
IMAGE_PATTERN = re.compile(r"!\[.*?\]\((https://[^)]+)\)")


def find_image_urls(markdown: str) -> List[str]:
    """Every ``https://`` image target in ``markdown``, in textual order."""
    return [m.group(1) for m in IMAGE_PATTERN.finditer(markdown or "")]


def localize_images(
    markdown: str,
    file_name: str,
    *,
    image_dir: str,
    image_link_prefix: str,
    fetch_image: Callable[[str, str], Any],
) -> str:
    """
    Download the remote images of ``markdown`` and point it at the local copies.

    The n-th match (1-based) is saved as ``<file_name>-<n><ext>``.  After each
    download every occurrence of that literal URL is replaced, so a URL
    appearing twice ends up linked to the first copy.
    """
    for ordinal, url in enumerate(find_image_urls(markdown), start=1):
        image_name = f"{file_name}-{ordinal}{image_extension(url)}"
        fetch_image(url, os.path.join(image_dir, image_name))
        markdown = markdown.replace(url, f"{image_link_prefix}{image_name}")
    return markdown
