"""Static HTML pages."""

from sopdesk.pages.root import render_root_page

__all__ = ["render_root_page"]
