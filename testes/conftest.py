import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from notion_export.config import ExportConfig


def rich_text(text):
    return [{"type": "text", "plain_text": text, "annotations": {}, "href": None}]


def make_properties(
    *,
    slug="hello-world",
    title="Hello",
    date="2024-01-01",
    category="Tech",
    tags=("a", "b"),
    published=True,
    description=None,
    image_url=None,
):
    props = {
        "title": {"type": "title", "title": rich_text(title)},
        "date": {"type": "date", "date": {"start": date, "end": None}},
        "description": {"type": "rich_text", "rich_text": rich_text(description) if description else []},
        "category": {"type": "select", "select": {"name": category}},
        "tags": {"type": "multi_select", "multi_select": [{"name": t} for t in tags]},
        "published": {"type": "checkbox", "checkbox": published},
        "image": {"type": "files", "files": []},
    }
    if slug is not None:
        props["slug"] = {"type": "rich_text", "rich_text": rich_text(slug) if slug else []}
    if image_url:
        props["image"]["files"] = [{"name": "cover", "type": "file", "file": {"url": image_url}}]
    return props


def make_page(page_id="0f6c1a2b-page", **kwargs):
    return {"object": "page", "id": page_id, "properties": make_properties(**kwargs)}


def paragraph(text):
    return {"id": f"blk-{text}", "type": "paragraph", "has_children": False, "paragraph": {"rich_text": rich_text(text)}}


def image_block(url, caption=""):
    return {
        "id": f"img-{url}",
        "type": "image",
        "has_children": False,
        "image": {"type": "file", "file": {"url": url}, "caption": rich_text(caption) if caption else []},
    }


class FakeNotionClient:
    """Stands in for NotionClient: canned query results and block trees."""

    def __init__(self, pages=None, blocks=None, *, has_more=False, error=None):
        self.pages = pages or []
        self.blocks = blocks or {}
        self.has_more = has_more
        self.error = error
        self.queries = []

    def query_database(self, database_id, body=None):
        self.queries.append(database_id)
        if self.error is not None:
            raise self.error
        return {"object": "list", "results": self.pages, "has_more": self.has_more, "next_cursor": None}

    def list_block_tree(self, block_id):
        return self.blocks.get(block_id, [])


class RecordingFetcher:
    """Image fetcher writing a small placeholder file and recording calls."""

    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def __call__(self, url, path):
        self.calls.append((url, path))
        if self.fail_on and self.fail_on in url:
            raise OSError(f"download failed for {url}")
        with open(path, "wb") as f:
            f.write(b"img:" + url.encode("utf-8"))
        return path


@pytest.fixture
def export_config(tmp_path):
    return ExportConfig(
        notion_secret="secret_test",
        database_id="db-123",
        posts_dir=str(tmp_path / "src" / "content" / "posts"),
        image_dir=str(tmp_path / "src" / "assets" / "images"),
        report_dir=str(tmp_path / "reports"),
        requests_per_minute=60000,
    )


@pytest.fixture
def fetcher():
    return RecordingFetcher()
