"""
Configuration for the Notion → markdown export.

A single :class:`ExportConfig` is built once at startup by
:func:`load_config` and handed to every component.  Values are layered,
later sources winning:

1. the defaults of the selected output profile (see :data:`PROFILES`);
2. an optional JSON file with ``notion`` and ``export`` sections;
3. the process environment (``NOTION_SECRET``, ``NOTION_DATABASE_ID`` and
   ``NOTION_EXPORT_PROFILE``).
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONFIG_FILE = os.path.join("config", "export_config.json")

# Output layouts of the two historical export scripts.
PROFILES: Dict[str, Dict[str, Any]] = {
    "assets": {
        "posts_dir": os.path.join("src", "content", "posts"),
        "image_dir": os.path.join("src", "assets", "images"),
        "image_link_prefix": "../../assets/images/",
        "policy": "parallel",
    },
    "public": {
        "posts_dir": os.path.join("src", "content", "posts"),
        "image_dir": os.path.join("public", "images"),
        "image_link_prefix": "/images/",
        "policy": "sequential",
    },
}
DEFAULT_PROFILE = "assets"


class ExportConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    notion_secret: str = ""
    database_id: str = ""
    api_base_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"

    profile: str = DEFAULT_PROFILE
    posts_dir: str = PROFILES[DEFAULT_PROFILE]["posts_dir"]
    image_dir: str = PROFILES[DEFAULT_PROFILE]["image_dir"]
    image_link_prefix: str = PROFILES[DEFAULT_PROFILE]["image_link_prefix"]
    policy: str = PROFILES[DEFAULT_PROFILE]["policy"]
    max_workers: int = Field(8, ge=1)

    request_timeout: Optional[float] = None
    requests_per_minute: int = Field(180, ge=1)
    report_dir: str = os.path.join("reports", "export")

    @field_validator("policy")
    @classmethod
    def _known_policy(cls, v: str) -> str:
        v = v.lower()
        if v not in ("parallel", "sequential"):
            raise ValueError(f"policy must be 'parallel' or 'sequential', got '{v}'")
        return v

    @field_validator("image_link_prefix")
    @classmethod
    def _trailing_slash(cls, v: str) -> str:
        if v and not v.endswith("/"):
            return v + "/"
        return v


def config_from_mapping(
    data: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ExportConfig:
    """
    Build an :class:`ExportConfig` from a parsed config file and an environment.

    :param data: The parsed JSON config (``{"notion": {...}, "export": {...}}``).
    :param environ: Environment mapping; defaults to :data:`os.environ`.
    :return: The resolved configuration.
    """
    data = dict(data or {})
    environ = os.environ if environ is None else environ
    notion = dict(data.get("notion") or {})
    export = dict(data.get("export") or {})

    profile = environ.get("NOTION_EXPORT_PROFILE") or export.get("profile") or DEFAULT_PROFILE
    if profile not in PROFILES:
        raise ValueError(f"Unknown export profile '{profile}'. Known profiles: {sorted(PROFILES)}")

    values: Dict[str, Any] = dict(PROFILES[profile])
    values.update(export)
    values["profile"] = profile

    values["notion_secret"] = environ.get("NOTION_SECRET") or notion.get("secret", "")
    values["database_id"] = environ.get("NOTION_DATABASE_ID") or notion.get("database_id", "")
    for key in ("api_base_url", "notion_version"):
        if notion.get(key):
            values[key] = notion[key]

    return ExportConfig(**values)


def load_config(config_file: Optional[str] = None) -> ExportConfig:
    """
    Read the optional JSON config file and overlay the environment.

    A missing file is not an error: the profile defaults and the environment
    are enough to run an export.
    """
    path = config_file or DEFAULT_CONFIG_FILE
    data: Dict[str, Any] = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    return config_from_mapping(data)
