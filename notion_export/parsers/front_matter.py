"""
Front matter for exported posts.

:func:`build_front_matter` maps the property bag of a Notion page onto the
header block expected by the blog's content collection.  Lines are emitted
in a fixed order::

    title, published, description, category, tags, draft, slug[, image]

Two properties share a name with a header key but not its meaning: the
``published`` header line holds the page's ``date`` property, while the
``published`` checkbox property drives ``draft`` (as its negation).
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from notion_export.fetchers.image_fetcher import image_extension

ImageFetcher = Callable[[str, str], Any]


class FrontMatterError(ValueError):
    """A required page property is missing or malformed."""


def _required(properties: Dict[str, Any], name: str, kind: str) -> Any:
    try:
        value = properties[name][kind]
    except (KeyError, TypeError) as e:
        raise FrontMatterError(f"Missing required property '{name}' ({kind})") from e
    if value is None:
        raise FrontMatterError(f"Property '{name}' has no {kind} value")
    return value


def _first_plain_text(items: Optional[List[Dict[str, Any]]]) -> str:
    if not items:
        return ""
    return items[0].get("plain_text") or ""


def format_date(start: str) -> str:
    """
    Format a Notion ``date.start`` value as ``YYYY-MM-DD`` in UTC.

    Date-only values are returned as-is; datetimes carrying an offset are
    converted to UTC first, so ``2024-01-01T01:00:00+08:00`` becomes
    ``2023-12-31``.
    """
    try:
        parsed = datetime.fromisoformat(start.replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        raise FrontMatterError(f"Invalid date value: {start!r}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def cover_image_url(properties: Dict[str, Any]) -> Optional[str]:
    """URL of the first file in the ``image`` property, or ``None``."""
    files = (properties.get("image") or {}).get("files") or []
    if not files:
        return None
    first = files[0]
    kind = first.get("type") or ("file" if "file" in first else "external")
    return (first.get(kind) or {}).get("url")


def build_front_matter(
    properties: Dict[str, Any],
    slug: str,
    *,
    image_dir: str,
    image_link_prefix: str,
    fetch_image: ImageFetcher,
) -> str:
    """
    Build the ``---`` delimited header block for a page.

    When the page has a cover image it is downloaded to
    ``<image_dir>/<slug>-cover<ext>`` and referenced from an ``image`` line.

    :param properties: The page's ``properties`` bag.
    :param slug: The resolved file name of the page (slug or page id).
    :param image_dir: Directory receiving the cover image.
    :param image_link_prefix: Prefix of image paths written into the header.
    :param fetch_image: Callable ``(url, path)`` downloading one image.
    :return: The header block, without a trailing newline.
    :raises FrontMatterError: if ``title``, ``date`` or ``category`` is missing.
    """
    title = _first_plain_text(_required(properties, "title", "title"))
    date = _required(properties, "date", "date")
    category = _required(properties, "category", "select")
    description = _first_plain_text((properties.get("description") or {}).get("rich_text"))
    tags = [tag["name"] for tag in (properties.get("tags") or {}).get("multi_select") or []]
    published = bool((properties.get("published") or {}).get("checkbox"))
    slug_text = _first_plain_text((properties.get("slug") or {}).get("rich_text")) or slug

    lines = [
        "---",
        f"title: {title}",
        f"published: {format_date(date.get('start'))}",
        f"description: {description}",
        f"category: {category['name']}",
        f"tags: [{', '.join(tags)}]",
        f"draft: {str(not published).lower()}",
        f"slug: {slug_text}",
    ]

    image_url = cover_image_url(properties)
    if image_url:
        file_name = f"{slug}-cover{image_extension(image_url)}"
        fetch_image(image_url, os.path.join(image_dir, file_name))
        lines.append(f'image: "{image_link_prefix}{file_name}"')

    lines.append("---")
    return "\n".join(lines)
