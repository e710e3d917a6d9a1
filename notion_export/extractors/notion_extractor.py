"""
Notion API helper functions for the markdown export.

This module implements the low-level interactions with the Notion REST API
needed by the export: querying a database for its pages and walking the
block tree of a page.  A simple rate limiter spaces requests to respect
Notion's documented average of three requests per second per integration.

Requests are not retried.  Any ``requests`` exception propagates to the
caller, which decides whether the failure is fatal for the run (listing) or
for a single page (block fetches).

Usage example::

    from notion_export.config import load_config
    from notion_export.extractors.notion_extractor import NotionClient, list_database_pages

    cfg = load_config()
    client = NotionClient(cfg)
    for page in list_database_pages(client, cfg.database_id):
        blocks = client.list_block_tree(page.id)
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from notion_export.config import ExportConfig
from notion_export.models import NotionPage

###############################################################################
# Rate limiting
###############################################################################

class RateLimiter:
    """
    Simple time-based rate limiter.  Ensures that no more than ``rpm``
    requests are dispatched per minute.  A lock makes it safe to share one
    limiter between the worker threads of a parallel export.
    """

    def __init__(self, rpm: int = 180) -> None:
        self.rpm = max(1, rpm)
        self.interval = 60.0 / float(self.rpm)
        self._last = 0.0
        self._lock = threading.Lock()

    def wait(self, time_fn: Callable[[], float] = time.time, sleep_fn: Callable[[float], None] = time.sleep) -> None:
        with self._lock:
            now = time_fn()
            dt = now - self._last
            if dt < self.interval:
                sleep_fn(self.interval - dt)
            self._last = time_fn()


def notion_headers(cfg: ExportConfig) -> Dict[str, str]:
    """
    Construct the default headers required for Notion API requests.

    :param cfg: The export configuration holding the integration secret.
    :return: A dictionary of headers including Authorization and Notion-Version.
    """
    return {
        "Authorization": f"Bearer {cfg.notion_secret}",
        "Notion-Version": cfg.notion_version,
    }


###############################################################################
# Client
###############################################################################

class NotionClient:
    """
    Thin wrapper over the two Notion endpoints the export uses.

    The client owns a :class:`requests.Session` and a :class:`RateLimiter`;
    both are created from the configuration passed in, never from module
    state.
    """

    def __init__(self, cfg: ExportConfig, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()
        self.session.headers.update(notion_headers(cfg))
        self._limiter = RateLimiter(cfg.requests_per_minute)

    def _url(self, path: str) -> str:
        return f"{self.cfg.api_base_url.rstrip('/')}/{path.lstrip('/')}"

    def query_database(self, database_id: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST ``/databases/{id}/query`` and return the decoded response."""
        self._limiter.wait()
        resp = self.session.post(
            self._url(f"databases/{database_id}/query"),
            json=body or {},
            timeout=self.cfg.request_timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        """Return every direct child of ``block_id``, following ``next_cursor``."""
        children: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"page_size": 100}
            if cursor:
                params["start_cursor"] = cursor
            self._limiter.wait()
            resp = self.session.get(
                self._url(f"blocks/{block_id}/children"),
                params=params,
                timeout=self.cfg.request_timeout,
            )
            resp.raise_for_status()
            data = resp.json()
            children.extend(data.get("results", []))
            if not data.get("has_more") or not data.get("next_cursor"):
                return children
            cursor = data["next_cursor"]

    def list_block_tree(self, block_id: str) -> List[Dict[str, Any]]:
        """
        Return the children of ``block_id`` with nested children attached.

        Each block that reports ``has_children`` gets a ``children`` key with
        its own subtree.  Child pages and child databases are not descended
        into; they are exported as separate pages, if at all.
        """
        blocks = self.list_block_children(block_id)
        for block in blocks:
            if block.get("has_children") and block.get("type") not in ("child_page", "child_database"):
                block["children"] = self.list_block_tree(block["id"])
        return blocks


###############################################################################
# Database listing
###############################################################################

def list_database_pages(client: NotionClient, database_id: str) -> List[NotionPage]:
    """
    Query ``database_id`` once and return its page records.

    Only the first page of query results is read.  When Notion reports more
    results a warning is printed and the remainder is dropped.

    :param client: A :class:`NotionClient` (or anything with ``query_database``).
    :param database_id: The Notion database to export.
    :return: The page records in the order Notion returned them.
    :raises requests.RequestException: on network or authentication failure.
    """
    data = client.query_database(database_id)
    results = data.get("results", [])
    if data.get("has_more"):
        print(
            f"[WARNING] Database {database_id} has more than {len(results)} pages; "
            "only the first page of results is exported."
        )
    return [NotionPage.model_validate(item) for item in results if item.get("object", "page") == "page"]
