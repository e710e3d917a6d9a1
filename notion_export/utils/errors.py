"""
Structured logging helpers for export errors and successes.

The :mod:`notion_export.utils.errors` module centralizes the writing of log
entries for both failed and successful operations during an export run.  Each
entry is appended to a JSON Lines file under the configured report directory
(``reports/export`` by default) so that the information can be reviewed or
parsed after a run.

Two public functions are provided:

``report_error``
    Record an error that occurred for a page.  An optional exception can be
    supplied and will be serialized to the log.

``report_ok``
    Record a successful step for a page.  Additional key/value information can
    be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
import threading
from typing import Any, Dict, Optional

# Mapping of event codes used throughout the export to descriptive messages.
# The keys include both error and success codes as the same lookup is used by
# :func:`report_error` and :func:`report_ok`.
ERRORS: Dict[str, str] = {
    "LIST_PAGES": "Failed to query the Notion database",
    "PAGE_EXPORT_FAILED": "Failed to export page",
    "IMAGE_DOWNLOAD": "Failed to download image",
    "PAGE_EXPORTED": "Page exported successfully",
}

DEFAULT_REPORT_DIR = os.path.join("reports", "export")

# Pages are exported from worker threads under the parallel policy.
_write_lock = threading.Lock()


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with _write_lock:
        with open(path, "a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.write("\n")


def report_error(
    code: str,
    post: Dict[str, Any],
    exc: Optional[BaseException] = None,
    *,
    report_dir: str = DEFAULT_REPORT_DIR,
) -> None:
    """Log an error event for ``post``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    post:
        A dictionary describing the page.  Only the ``id`` and ``slug`` keys
        are referenced if present.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    report_dir:
        Directory holding ``errors.jsonl``.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "id": post.get("id"),
        "slug": post.get("slug"),
    }
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {message} - {post.get('slug') or post.get('id') or ''}")
    _write_jsonl(os.path.join(report_dir, "errors.jsonl"), entry)


def report_ok(
    code: str,
    post: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    *,
    report_dir: str = DEFAULT_REPORT_DIR,
) -> None:
    """Log a successful event for ``post``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    post:
        A dictionary describing the page.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    report_dir:
        Directory holding ``success.jsonl``.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "id": post.get("id"),
        "slug": post.get("slug"),
    }
    if extra:
        entry.update(extra)
    print(f"[OK] {message} - {post.get('slug') or post.get('id') or ''}")
    _write_jsonl(os.path.join(report_dir, "success.jsonl"), entry)
