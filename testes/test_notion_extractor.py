import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
import requests

from conftest import FakeNotionClient, make_page, paragraph
from notion_export.extractors.notion_extractor import (
    NotionClient,
    RateLimiter,
    list_database_pages,
    notion_headers,
)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, post_responses=None, get_responses=None):
        self.headers = {}
        self.post_responses = list(post_responses or [])
        self.get_responses = list(get_responses or [])
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append(("POST", url, json, timeout))
        return self.post_responses.pop(0)

    def get(self, url, params=None, timeout=None):
        self.calls.append(("GET", url, dict(params or {}), timeout))
        return self.get_responses.pop(0)


def test_notion_headers(export_config):
    assert notion_headers(export_config) == {
        "Authorization": "Bearer secret_test",
        "Notion-Version": "2022-06-28",
    }


def test_query_database_posts_once(export_config):
    session = FakeSession(post_responses=[FakeResponse({"results": [make_page()], "has_more": False})])
    client = NotionClient(export_config, session=session)

    pages = list_database_pages(client, "db-123")

    assert [p.id for p in pages] == ["0f6c1a2b-page"]
    assert pages[0].file_name() == "hello-world"
    assert session.calls == [("POST", "https://api.notion.com/v1/databases/db-123/query", {}, None)]
    assert session.headers["Authorization"] == "Bearer secret_test"


def test_query_database_auth_error_propagates(export_config):
    session = FakeSession(post_responses=[FakeResponse({"message": "unauthorized"}, status_code=401)])
    client = NotionClient(export_config, session=session)
    with pytest.raises(requests.HTTPError):
        list_database_pages(client, "db-123")


def test_has_more_is_not_followed(capsys):
    client = FakeNotionClient(pages=[make_page("p1"), make_page("p2")], has_more=True)

    pages = list_database_pages(client, "db-123")

    assert [p.id for p in pages] == ["p1", "p2"]
    assert client.queries == ["db-123"]
    assert "[WARNING]" in capsys.readouterr().out


def test_block_children_follow_cursor_and_nest(export_config):
    parent = dict(paragraph("parent"), id="b1", has_children=True)
    session = FakeSession(
        get_responses=[
            FakeResponse({"results": [parent], "has_more": True, "next_cursor": "c2"}),
            FakeResponse({"results": [paragraph("second")], "has_more": False, "next_cursor": None}),
            FakeResponse({"results": [paragraph("nested")], "has_more": False, "next_cursor": None}),
        ]
    )
    client = NotionClient(export_config, session=session)

    tree = client.list_block_tree("page-1")

    assert [b["id"] for b in tree] == ["b1", "blk-second"]
    assert [b["id"] for b in tree[0]["children"]] == ["blk-nested"]
    urls = [(c[1], c[2].get("start_cursor")) for c in session.calls]
    assert urls == [
        ("https://api.notion.com/v1/blocks/page-1/children", None),
        ("https://api.notion.com/v1/blocks/page-1/children", "c2"),
        ("https://api.notion.com/v1/blocks/b1/children", None),
    ]


def test_child_pages_are_not_descended(export_config):
    child = {"id": "cp", "type": "child_page", "has_children": True, "child_page": {"title": "Sub"}}
    session = FakeSession(get_responses=[FakeResponse({"results": [child], "has_more": False})])
    client = NotionClient(export_config, session=session)

    tree = client.list_block_tree("page-1")

    assert "children" not in tree[0]
    assert len(session.calls) == 1


def test_rate_limiter_sleeps_for_remaining_interval():
    clock = [100.0]
    slept = []
    limiter = RateLimiter(rpm=60)

    limiter.wait(time_fn=lambda: clock[0], sleep_fn=slept.append)
    clock[0] += 0.25
    limiter.wait(time_fn=lambda: clock[0], sleep_fn=slept.append)

    assert slept == [pytest.approx(0.75)]
