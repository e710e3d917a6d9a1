"""
Extractors for the Notion workspace.

This subpackage wraps the Notion REST API calls the export needs: a single
database query returning page records, and block-tree retrieval for the
content of each page.
"""

from .notion_extractor import NotionClient, RateLimiter, list_database_pages, notion_headers

__all__ = ["NotionClient", "RateLimiter", "list_database_pages", "notion_headers"]
