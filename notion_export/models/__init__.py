from .notion_page import ExportSummary, ExtractedPost, NotionPage

__all__ = ["NotionPage", "ExtractedPost", "ExportSummary"]
