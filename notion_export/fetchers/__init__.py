"""
Fetchers for remote assets referenced by exported pages.
"""

from .image_fetcher import download_image, ensure_output_dirs, image_extension

__all__ = ["download_image", "ensure_output_dirs", "image_extension"]
