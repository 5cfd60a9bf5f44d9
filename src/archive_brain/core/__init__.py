"""Core domain layer."""

from archive_brain.core.article_store import ArticleStore
from archive_brain.core.category_index import (
    CategoryIndex,
    build_category_index,
    category_suggestions,
    filter_articles,
    sort_memos_for_display,
)
from archive_brain.core.entities import (
    Article,
    ArticleDraft,
    ArticleFilter,
    ArticleFormat,
    Attachment,
    CategoryEntry,
    Memo,
    is_youtube_url,
)
from archive_brain.core.errors import ArchiveError, AttachmentRejected, ValidationError
from archive_brain.core.interfaces import KeyValueStorage, Summarizer

__all__ = [
    "Article",
    "ArticleDraft",
    "ArticleFilter",
    "ArticleFormat",
    "Attachment",
    "CategoryEntry",
    "Memo",
    "is_youtube_url",
    "ArchiveError",
    "AttachmentRejected",
    "ValidationError",
    "KeyValueStorage",
    "Summarizer",
    "ArticleStore",
    "CategoryIndex",
    "build_category_index",
    "category_suggestions",
    "filter_articles",
    "sort_memos_for_display",
]
