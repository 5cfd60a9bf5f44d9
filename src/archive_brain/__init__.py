"""Personal article archive with memos and AI summaries."""

__version__ = "0.1.0"
