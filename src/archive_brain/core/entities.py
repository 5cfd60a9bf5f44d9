"""Core domain entities."""

import base64
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from archive_brain.core.errors import ValidationError


class ArticleFormat(str, Enum):
    """Kind of archived material."""

    NEWS = "news"
    BLOG = "blog"
    BOOK = "book"
    PAPER = "paper"
    VIDEO = "video"
    PDF = "pdf"
    OTHER = "other"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


def is_youtube_url(url: str) -> bool:
    return "youtube.com/" in url or "youtu.be/" in url


@dataclass(frozen=True)
class Attachment:
    """File attached to an article, stored inline as a data URI."""

    name: str
    mime_type: str
    content: str

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @classmethod
    def from_bytes(cls, name: str, mime_type: str, data: bytes) -> "Attachment":
        encoded = base64.b64encode(data).decode("ascii")
        return cls(name=name, mime_type=mime_type, content=f"data:{mime_type};base64,{encoded}")

    def decode(self) -> bytes:
        """Raw bytes of the data URI payload.

        Raises:
            ValueError: if content is not a base64 data URI.
        """
        header, sep, payload = self.content.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError(f"Invalid data URI for attachment '{self.name}'")
        return base64.b64decode(payload, validate=True)

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "mimeType": self.mime_type, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Attachment":
        return cls(
            name=str(data["name"]),
            mime_type=str(data["mimeType"]),
            content=str(data["content"]),
        )


@dataclass(frozen=True)
class Memo:
    """Annotation attached to a single article."""

    id: str
    content: str
    is_summary: bool
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "isSummary": self.is_summary,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Memo":
        is_summary = data.get("isSummary", False)
        if not isinstance(is_summary, bool):
            raise TypeError(f"isSummary must be a boolean, got {type(is_summary).__name__}")
        return cls(
            id=str(data["id"]),
            content=str(data["content"]),
            is_summary=is_summary,
            created_at=parse_timestamp(data["createdAt"]),
        )


@dataclass(frozen=True)
class ArticleDraft:
    """Mutable fields of an article, as submitted from the form.

    Title and category are required; everything else may be empty.
    """

    title: str
    category: str
    body: str = ""
    source: str = ""
    format: ArticleFormat = ArticleFormat.NEWS
    keywords: list[str] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValidationError("Title cannot be empty")
        if not self.category or not self.category.strip():
            raise ValidationError("Category cannot be empty")


@dataclass(frozen=True)
class Article:
    """Archived piece of content with its memo thread."""

    id: str
    title: str
    body: str
    source: str
    created_at: datetime
    format: ArticleFormat
    category: str
    keywords: list[str]
    memos: list[Memo] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.title:
            raise ValidationError("Title cannot be empty")
        if not self.category:
            raise ValidationError("Category cannot be empty")

    def find_memo(self, memo_id: str) -> Optional[Memo]:
        return next((m for m in self.memos if m.id == memo_id), None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "source": self.source,
            "createdAt": format_timestamp(self.created_at),
            "format": self.format.value,
            "category": self.category,
            "keywords": list(self.keywords),
            "memos": [m.to_dict() for m in self.memos],
        }
        if self.attachments:
            data["attachments"] = [a.to_dict() for a in self.attachments]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        """Rebuild an article from its stored record.

        Raises:
            KeyError, TypeError, ValueError: if the record is structurally
                incompatible.
        """
        keywords = data.get("keywords", [])
        if not isinstance(keywords, list):
            raise TypeError("keywords must be a list")

        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            body=str(data.get("body", "")),
            source=str(data.get("source", "")),
            created_at=parse_timestamp(data["createdAt"]),
            format=ArticleFormat(data.get("format", ArticleFormat.OTHER.value)),
            category=str(data["category"]),
            keywords=[str(k) for k in keywords],
            memos=[Memo.from_dict(m) for m in data.get("memos", [])],
            attachments=[Attachment.from_dict(a) for a in data.get("attachments") or []],
        )


@dataclass(frozen=True)
class CategoryEntry:
    """Category with the distinct keywords used by its articles."""

    category: str
    keywords: list[str]


@dataclass(frozen=True)
class ArticleFilter:
    """Filter applied to the article list.

    At most one of ``category`` and ``keyword`` is set; neither means no filter.
    """

    category: Optional[str] = None
    keyword: Optional[str] = None

    def __post_init__(self) -> None:
        if self.category is not None and self.keyword is not None:
            raise ValueError("Filter by category or keyword, not both")

    @classmethod
    def none(cls) -> "ArticleFilter":
        return cls()

    @classmethod
    def by_category(cls, category: str) -> "ArticleFilter":
        return cls(category=category)

    @classmethod
    def by_keyword(cls, keyword: str) -> "ArticleFilter":
        return cls(keyword=keyword)

    @property
    def is_empty(self) -> bool:
        return self.category is None and self.keyword is None
