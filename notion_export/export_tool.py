"""
High-level orchestration of the Notion → markdown export.

This module defines a :class:`NotionExportTool` class that ties together the
extractor, parsers and image fetcher into a complete pipeline.  A run lists
the pages of one Notion database and, for every page, converts its blocks to
markdown, downloads the images it references, builds the front matter and
writes ``<slug-or-id>.md`` into the posts directory.

Configuration is supplied as an :class:`~notion_export.config.ExportConfig`.
Its ``policy`` selects how pages are processed: ``parallel`` submits every
page to a thread pool, ``sequential`` exports them one after the other.
Failures are contained per page; only a failed database query ends the run
early.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Tuple

from notion_export.config import ExportConfig
from notion_export.extractors.notion_extractor import NotionClient, list_database_pages
from notion_export.fetchers.image_fetcher import download_image, ensure_output_dirs
from notion_export.models import ExportSummary, ExtractedPost, NotionPage
from notion_export.parsers.front_matter import build_front_matter
from notion_export.parsers.image_links import localize_images
from notion_export.parsers.notion_markdown import convert_page
from notion_export.utils.errors import report_error, report_ok


class NotionExportTool:
    """
    Encapsulates all state and behavior required to export the pages of a
    Notion database to markdown files.  The Notion client and the image
    fetcher can be injected; by default they are built from the
    configuration.  Detailed success and failure information is recorded
    using the :mod:`notion_export.utils.errors` module.
    """

    def __init__(
        self,
        config: ExportConfig,
        *,
        client: Optional[Any] = None,
        fetch_image: Optional[Callable[[str, str], Any]] = None,
    ) -> None:
        self.config = config
        self.client = client if client is not None else NotionClient(config)
        self.fetch_image = fetch_image or self._download
        self._log_lock = threading.Lock()

    def _download(self, url: str, file_path: str) -> str:
        return download_image(url, file_path, timeout=self.config.request_timeout)

    def _fetch_reported(self, page: NotionPage, file_name: str) -> Callable[[str, str], Any]:
        """Wrap the image fetcher so each failed download is reported on its own."""

        def fetch(url: str, file_path: str) -> Any:
            try:
                return self.fetch_image(url, file_path)
            except Exception as e:
                report_error(
                    "IMAGE_DOWNLOAD",
                    {"id": page.id, "slug": file_name},
                    e,
                    report_dir=self.config.report_dir,
                )
                raise

        return fetch

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        # Append to log file
        os.makedirs(self.config.report_dir, exist_ok=True)
        with self._log_lock:
            with open(os.path.join(self.config.report_dir, "export.log"), "a", encoding="utf-8") as f:
                f.write(f"{level}: {message}\n")

    def list_pages(self) -> List[NotionPage]:
        return list_database_pages(self.client, self.config.database_id)

    def extract_page(self, page: NotionPage, file_name: str) -> str:
        """
        Export one page and return the path of the written markdown file.

        Inline images are localized before the front matter is built, so a
        page that fails on its cover image may still leave inline images
        behind.  Any exception propagates to the caller.
        """
        cfg = self.config
        fetch = self._fetch_reported(page, file_name)
        markdown = convert_page(self.client, page.id)
        body = localize_images(
            markdown,
            file_name,
            image_dir=cfg.image_dir,
            image_link_prefix=cfg.image_link_prefix,
            fetch_image=fetch,
        )
        front_matter = build_front_matter(
            page.properties,
            file_name,
            image_dir=cfg.image_dir,
            image_link_prefix=cfg.image_link_prefix,
            fetch_image=fetch,
        )
        post = ExtractedPost(front_matter=front_matter, body=body)

        file_path = os.path.join(cfg.posts_dir, f"{file_name}.md")
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(post.render())
        return file_path

    def _export_one(self, page: NotionPage, file_name: str) -> Tuple[str, bool]:
        info = {"id": page.id, "slug": file_name}
        try:
            file_path = self.extract_page(page, file_name)
        except Exception as e:
            self.log_message(f"Error extracting page content ({file_name}): {e}", "ERROR")
            report_error("PAGE_EXPORT_FAILED", info, e, report_dir=self.config.report_dir)
            return file_name, False
        self.log_message(f"Page content extracted successfully and saved to {file_path}", "DEBUG")
        report_ok("PAGE_EXPORTED", info, {"path": file_path}, report_dir=self.config.report_dir)
        return file_name, True

    def run(self) -> ExportSummary:
        """
        Export every page of the configured database.

        Never raises for a failed database query or a failed page; the
        returned :class:`ExportSummary` tells what happened.
        """
        cfg = self.config
        summary = ExportSummary()
        ensure_output_dirs([cfg.posts_dir, cfg.image_dir])

        try:
            pages = self.list_pages()
        except Exception as e:
            self.log_message(f"Error retrieving pages from database: {e}", "ERROR")
            report_error("LIST_PAGES", {"id": cfg.database_id}, e, report_dir=cfg.report_dir)
            summary.listing_error = str(e)
            return summary

        summary.listed = len(pages)
        jobs: List[Tuple[NotionPage, str]] = [(page, page.file_name()) for page in pages]

        if cfg.policy == "parallel" and len(jobs) > 1:
            for index, (page, file_name) in enumerate(jobs, start=1):
                self.log_message(f"Processing page {index} of {len(jobs)}: {file_name}")
            with ThreadPoolExecutor(max_workers=min(cfg.max_workers, len(jobs))) as executor:
                futures = [executor.submit(self._export_one, page, file_name) for page, file_name in jobs]
                results = [future.result() for future in futures]
        else:
            results = []
            for index, (page, file_name) in enumerate(jobs, start=1):
                self.log_message(f"Processing page {index} of {len(jobs)}: {file_name}")
                results.append(self._export_one(page, file_name))

        for file_name, ok in results:
            (summary.written if ok else summary.failed).append(file_name)

        self.log_message(
            f"Export finished: {len(summary.written)} written, {len(summary.failed)} failed, {summary.listed} listed."
        )
        return summary
