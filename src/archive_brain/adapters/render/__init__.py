"""Text renderers for the command line."""

from archive_brain.adapters.render.markdown_renderer import MarkdownRenderer

__all__ = ["MarkdownRenderer"]
