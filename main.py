"""
Entry point for the Notion to markdown export.
"""

from dotenv import load_dotenv

from notion_export.config import DEFAULT_CONFIG_FILE, load_config
from notion_export.export_tool import NotionExportTool
from notion_export.utils.pre_flight_checks import PreFlightCheckError, run_notion_pre_flight_checks


def main():
    """
    Main function to run the Notion export.
    """
    load_dotenv(override=False)

    try:
        config = load_config(DEFAULT_CONFIG_FILE)
    except ValueError as e:
        print(f"[ERROR] Invalid configuration: {e}")
        return

    try:
        run_notion_pre_flight_checks(config)
    except PreFlightCheckError as e:
        print(f"[ERROR] {e}")
        return

    tool = NotionExportTool(config)
    tool.log_message(f"Starting Notion export (profile '{config.profile}', policy '{config.policy}').")
    tool.log_message(f"Posts directory: {config.posts_dir}", level="DEBUG")
    tool.log_message(f"Images directory: {config.image_dir}", level="DEBUG")

    tool.run()

if __name__ == "__main__":
    main()
