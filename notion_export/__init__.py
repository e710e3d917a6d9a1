"""
Top-level package for the Notion → markdown blog export.

This package bundles all components required to list the pages of a Notion
database, convert their blocks to markdown, download the images they
reference and write one front-matter markdown file per post.  Modules are
split into subpackages:

* :mod:`notion_export.extractors` – Notion API client and database listing
* :mod:`notion_export.parsers` – block conversion, image links, front matter
* :mod:`notion_export.fetchers` – image downloads
* :mod:`notion_export.models` – page records and export results
* :mod:`notion_export.utils` – structured reports and pre-flight checks

Each layer receives the configuration it needs explicitly; orchestration is
handled in :mod:`notion_export.export_tool`.
"""

__version__ = "0.1.0"
