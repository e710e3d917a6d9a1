from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NotionPage(BaseModel):
    """A page record as returned by a Notion database query."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., min_length=1)
    properties: dict[str, Any] = Field(default_factory=dict)
    url: Optional[str] = None
    archived: Optional[bool] = None
    created_time: Optional[datetime] = None
    last_edited_time: Optional[datetime] = None

    def slug(self) -> Optional[str]:
        """Plain text of the first ``slug`` rich-text item, if any."""
        prop = self.properties.get("slug") or {}
        items = prop.get("rich_text") or []
        if not items:
            return None
        return items[0].get("plain_text") or None

    def file_name(self) -> str:
        return self.slug() or self.id


class ExtractedPost(BaseModel):
    front_matter: str
    body: str

    def render(self) -> str:
        return f"{self.front_matter}\n\n{self.body}"


class ExportSummary(BaseModel):
    listed: int = 0
    written: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    listing_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.listing_error is None and not self.failed
