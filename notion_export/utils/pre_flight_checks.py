import os

from notion_export.config import ExportConfig


class PreFlightCheckError(Exception):
    """Custom exception for pre-flight check failures."""
    pass


def run_notion_pre_flight_checks(config: ExportConfig) -> None:
    """
    Verifies that the export is configured well enough to start talking to Notion.

    No network call is made here; an unreachable workspace is reported by the
    database query itself.

    Args:
        config: The export configuration.

    Raises:
        PreFlightCheckError: If any check fails.
    """
    print("[INFO] Running pre-flight checks...")

    if not config.notion_secret:
        raise PreFlightCheckError("NOTION_SECRET is not set in the environment or the config file.")

    if not config.database_id:
        raise PreFlightCheckError("NOTION_DATABASE_ID is not set in the environment or the config file.")

    for path in (config.posts_dir, config.image_dir):
        if os.path.exists(path) and not os.path.isdir(path):
            raise PreFlightCheckError(f"Output path '{path}' exists and is not a directory.")

    print("[INFO] Pre-flight checks passed successfully.")
