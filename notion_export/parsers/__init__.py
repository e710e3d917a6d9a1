"""
Parsers and converters used by the export pipeline.

* :mod:`notion_export.parsers.notion_markdown` – Notion blocks to markdown
* :mod:`notion_export.parsers.image_links` – remote image links to local files
* :mod:`notion_export.parsers.front_matter` – page properties to front matter
"""

from .front_matter import FrontMatterError, build_front_matter
from .image_links import find_image_urls, localize_images
from .notion_markdown import blocks_to_markdown, convert_page, rich_text_to_markdown

__all__ = [
    "FrontMatterError",
    "build_front_matter",
    "find_image_urls",
    "localize_images",
    "blocks_to_markdown",
    "convert_page",
    "rich_text_to_markdown",
]
