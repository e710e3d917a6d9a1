from __future__ import annotations

from typing import Any, Dict, List, Optional

Block = Dict[str, Any]

LIST_TYPES = ("bulleted_list_item", "numbered_list_item", "to_do")
HEADINGS = {"heading_1": "#", "heading_2": "##", "heading_3": "###"}
LINK_TYPES = ("bookmark", "embed", "link_preview", "video", "file", "pdf", "audio")
CONTAINER_TYPES = ("column_list", "column", "synced_block", "template")


def convert_page(client: Any, page_id: str) -> str:
    """
    Fetch the block tree of ``page_id`` and render it as markdown.

    ``client`` only needs a ``list_block_tree(block_id)`` method; see
    :class:`notion_export.extractors.NotionClient`.
    """
    return blocks_to_markdown(client.list_block_tree(page_id))


def rich_text_to_markdown(items: Optional[List[Dict[str, Any]]]) -> str:
    """
    Render a Notion rich-text array with inline decorations.

    Covered: bold, italic, strikethrough, inline code, links and inline
    equations.  Underline and colors have no markdown form and are dropped.
    """
    parts: List[str] = []
    for item in items or []:
        text = item.get("plain_text", "")
        if not text:
            continue
        if item.get("type") == "equation":
            parts.append(f"${item.get('equation', {}).get('expression', text)}$")
            continue

        # Keep surrounding whitespace outside the markers
        stripped = text.strip()
        if not stripped:
            parts.append(text)
            continue
        lead = text[: len(text) - len(text.lstrip())]
        trail = text[len(text.rstrip()):]

        ann = item.get("annotations") or {}
        if ann.get("code"):
            stripped = f"`{stripped}`"
        if ann.get("bold"):
            stripped = f"**{stripped}**"
        if ann.get("italic"):
            stripped = f"_{stripped}_"
        if ann.get("strikethrough"):
            stripped = f"~~{stripped}~~"
        href = item.get("href")
        if href:
            stripped = f"[{stripped}]({href})"
        parts.append(f"{lead}{stripped}{trail}")
    return "".join(parts)


def _plain(items: Optional[List[Dict[str, Any]]]) -> str:
    return "".join(item.get("plain_text", "") for item in items or [])


def _file_url(data: Dict[str, Any]) -> str:
    kind = data.get("type") or ("file" if "file" in data else "external")
    return (data.get(kind) or {}).get("url", "") or data.get("url", "")


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


def _table_to_markdown(block: Block) -> str:
    rows = [
        [rich_text_to_markdown(cell).replace("|", "\\|") for cell in (row.get("table_row") or {}).get("cells", [])]
        for row in block.get("children", [])
        if row.get("type") == "table_row"
    ]
    if not rows:
        return ""
    width = max(len(r) for r in rows)
    rows = [r + [""] * (width - len(r)) for r in rows]
    lines = ["| " + " | ".join(rows[0]) + " |", "|" + "|".join([" --- "] * width) + "|"]
    lines.extend("| " + " | ".join(r) + " |" for r in rows[1:])
    return "\n".join(lines)


def block_to_markdown(block: Block, *, number: int = 1) -> str:
    """
    Render one block (and its ``children`` subtree, if attached).

    ``number`` is the ordinal used when ``block`` is a numbered list item.
    Unsupported block types render as an empty string.
    """
    kind = block.get("type", "")
    data = block.get(kind) or {}
    children: List[Block] = block.get("children") or []
    text = rich_text_to_markdown(data.get("rich_text"))

    if kind == "paragraph":
        if children:
            return "\n\n".join(part for part in (text, blocks_to_markdown(children)) if part)
        return text
    if kind in HEADINGS:
        heading = f"{HEADINGS[kind]} {text}"
        if children:
            heading = f"{heading}\n\n{blocks_to_markdown(children)}"
        return heading
    if kind in LIST_TYPES:
        if kind == "bulleted_list_item":
            marker = "- "
        elif kind == "numbered_list_item":
            marker = f"{number}. "
        else:
            marker = "- [x] " if data.get("checked") else "- [ ] "
        line = marker + text
        if children:
            width = len(marker) if kind == "numbered_list_item" else 2
            line = f"{line}\n{_indent(blocks_to_markdown(children), ' ' * width)}"
        return line
    if kind == "quote":
        body = text
        if children:
            body = f"{body}\n\n{blocks_to_markdown(children)}"
        return _indent(body, "> ").replace("\n\n", "\n>\n")
    if kind == "callout":
        icon = (data.get("icon") or {}).get("emoji")
        body = f"{icon} {text}" if icon else text
        if children:
            body = f"{body}\n\n{blocks_to_markdown(children)}"
        return _indent(body, "> ").replace("\n\n", "\n>\n")
    if kind == "toggle":
        inner = blocks_to_markdown(children)
        return f"<details>\n<summary>{text}</summary>\n\n{inner}\n\n</details>"
    if kind == "code":
        language = data.get("language", "")
        if language == "plain text":
            language = ""
        return f"```{language}\n{_plain(data.get('rich_text'))}\n```"
    if kind == "equation":
        return f"$$\n{data.get('expression', '')}\n$$"
    if kind == "divider":
        return "---"
    if kind == "image":
        caption = _plain(data.get("caption")) or "image"
        return f"![{caption}]({_file_url(data)})"
    if kind in LINK_TYPES:
        url = _file_url(data)
        if not url:
            return ""
        caption = _plain(data.get("caption")) or data.get("name") or url
        return f"[{caption}]({url})"
    if kind == "table":
        return _table_to_markdown(block)
    if kind in CONTAINER_TYPES:
        return blocks_to_markdown(children)
    if kind in ("child_page", "child_database"):
        return f"**{data.get('title', '')}**"
    return ""


def blocks_to_markdown(blocks: List[Block]) -> str:
    """
    Render a list of sibling blocks.

    Blocks are separated by blank lines, except consecutive list items which
    are kept on adjacent lines so they form one markdown list.  Numbered
    items are counted from 1 within each run.
    """
    out: List[str] = []
    previous: Optional[str] = None
    number = 0
    for block in blocks:
        kind = block.get("type", "")
        ordinal = number + 1 if kind == "numbered_list_item" and previous == kind else 1
        rendered = block_to_markdown(block, number=ordinal)
        # Empty renders leave the surrounding list untouched
        if not rendered:
            continue
        if out:
            same_list = kind in LIST_TYPES and previous in LIST_TYPES
            out.append("\n" if same_list else "\n\n")
        out.append(rendered)
        previous = kind
        number = ordinal
    return "".join(out)
