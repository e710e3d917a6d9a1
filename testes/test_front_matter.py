import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from conftest import make_properties
from notion_export.parsers.front_matter import FrontMatterError, build_front_matter, format_date


def _build(props, slug="hello-world", fetch_image=None, image_dir="images"):
    def no_fetch(url, path):
        raise AssertionError("no image should be downloaded")

    return build_front_matter(
        props,
        slug,
        image_dir=image_dir,
        image_link_prefix="../../assets/images/",
        fetch_image=fetch_image or no_fetch,
    )


def test_hello_world_front_matter():
    assert _build(make_properties()) == (
        "---\n"
        "title: Hello\n"
        "published: 2024-01-01\n"
        "description: \n"
        "category: Tech\n"
        "tags: [a, b]\n"
        "draft: false\n"
        "slug: hello-world\n"
        "---"
    )


def test_keys_are_emitted_in_fixed_order():
    lines = _build(make_properties(description="About things")).split("\n")
    keys = [line.split(":", 1)[0] for line in lines[1:-1]]
    assert keys == ["title", "published", "description", "category", "tags", "draft", "slug"]
    assert "description: About things" in lines


@pytest.mark.parametrize("published, draft", [(True, "false"), (False, "true")])
def test_draft_is_negated_published_checkbox(published, draft):
    assert f"draft: {draft}" in _build(make_properties(published=published)).split("\n")


def test_missing_published_checkbox_is_a_draft():
    props = make_properties()
    del props["published"]
    assert "draft: true" in _build(props).split("\n")


def test_empty_tags_render_as_empty_list():
    assert "tags: []" in _build(make_properties(tags=())).split("\n")


def test_slug_line_falls_back_to_file_name():
    props = make_properties(slug=None)
    assert "slug: 0f6c1a2b-page" in _build(props, slug="0f6c1a2b-page").split("\n")


@pytest.mark.parametrize("missing", ["title", "date", "category"])
def test_missing_required_property_raises(missing):
    props = make_properties()
    del props[missing]
    with pytest.raises(FrontMatterError):
        _build(props)


def test_unset_category_select_raises():
    props = make_properties()
    props["category"]["select"] = None
    with pytest.raises(FrontMatterError):
        _build(props)


def test_cover_image_is_downloaded_and_referenced(tmp_path):
    calls = []
    url = "https://prod-files.s3.amazonaws.com/abc/cover.jpeg?X-Amz-Signature=xyz"
    props = make_properties(image_url=url)

    out = _build(props, fetch_image=lambda u, p: calls.append((u, p)), image_dir=str(tmp_path))

    assert calls == [(url, os.path.join(str(tmp_path), "hello-world-cover.jpeg"))]
    lines = out.split("\n")
    assert lines[-2] == 'image: "../../assets/images/hello-world-cover.jpeg"'
    assert lines[-1] == "---"


def test_external_cover_image_is_supported():
    calls = []
    props = make_properties()
    props["image"]["files"] = [{"name": "x", "type": "external", "external": {"url": "https://cdn.example.com/x.png"}}]
    out = _build(props, fetch_image=lambda u, p: calls.append(u))
    assert calls == ["https://cdn.example.com/x.png"]
    assert 'image: "../../assets/images/hello-world-cover.png"' in out


def test_format_date_variants():
    assert format_date("2024-01-01") == "2024-01-01"
    assert format_date("2024-03-05T10:30:00.000Z") == "2024-03-05"
    assert format_date("2024-01-01T01:00:00.000+08:00") == "2023-12-31"
    with pytest.raises(FrontMatterError):
        format_date("not a date")
