"""In-memory article collection with write-through persistence."""

import json
import uuid
from dataclasses import replace
from typing import Callable, Optional

from archive_brain.core.entities import (
    Article,
    ArticleDraft,
    ArticleFormat,
    Memo,
    utc_now,
)
from archive_brain.core.interfaces import KeyValueStorage

DEFAULT_STORAGE_KEY = "archive-brain-articles"


def seed_articles() -> list[Article]:
    """Default collection used when storage is empty or unreadable."""
    return [
        Article(
            id=str(uuid.uuid4()),
            title="A deep dive into React Hooks",
            body=(
                "React Hooks let function components use state and lifecycle features. "
                "Hooks such as useState, useEffect and useContext make code easier to "
                "reuse and read. useEffect runs work after rendering, which makes it "
                "useful for side effects like API calls or setting up and tearing down "
                "subscriptions. A badly managed dependency array can cause infinite "
                "loops or unexpected behavior, so it needs care."
            ),
            source="https://reactjs.org/docs/hooks-intro.html",
            created_at=utc_now(),
            format=ArticleFormat.BLOG,
            category="Tech",
            keywords=["React", "Frontend", "JavaScript"],
            memos=[],
        )
    ]


class ArticleStore:
    """Owns the article collection and mirrors it to durable storage.

    Every mutation builds a new list and swaps it in, then persists the whole
    collection. The previous list object is never modified, so callers may
    memoize on list identity.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        seed_factory: Callable[[], list[Article]] = seed_articles,
    ) -> None:
        self.storage = storage
        self.storage_key = storage_key
        self.seed_factory = seed_factory
        self._articles: list[Article] = []

    @property
    def articles(self) -> list[Article]:
        return self._articles

    def load(self) -> list[Article]:
        """Load the collection, falling back to seed data. Never raises."""
        articles = self._read()
        if articles is None:
            articles = self.seed_factory()
            self._swap(articles)
        else:
            self._articles = articles
        return self._articles

    def _read(self) -> Optional[list[Article]]:
        try:
            raw = self.storage.get(self.storage_key)
        except (OSError, UnicodeDecodeError) as e:
            print(f"⚠️  Warning: Could not read '{self.storage_key}': {e}")
            return None

        if raw is None:
            return None

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a list of articles, got {type(data).__name__}")
            return [Article.from_dict(record) for record in data]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            print(f"⚠️  Warning: Stored articles are unreadable, reseeding: {type(e).__name__}: {e}")
            return None

    def persist(self, articles: list[Article]) -> bool:
        """Write the full collection. Failures are logged, not raised."""
        try:
            payload = json.dumps([a.to_dict() for a in articles], ensure_ascii=False)
            self.storage.set(self.storage_key, payload)
            return True
        except (OSError, TypeError, ValueError) as e:
            print(f"⚠️  Warning: Could not save articles: {e}")
            return False

    def _swap(self, articles: list[Article]) -> None:
        self._articles = articles
        self.persist(articles)

    def get_article(self, article_id: str) -> Optional[Article]:
        return next((a for a in self._articles if a.id == article_id), None)

    def create_article(self, draft: ArticleDraft) -> Article:
        """Create an article from a validated draft and prepend it."""
        article = Article(
            id=self._new_article_id(),
            title=draft.title,
            body=draft.body,
            source=draft.source,
            created_at=utc_now(),
            format=draft.format,
            category=draft.category,
            keywords=list(draft.keywords),
            memos=[],
            attachments=list(draft.attachments),
        )
        self._swap([article, *self._articles])
        return article

    def update_article(self, article_id: str, draft: ArticleDraft) -> Optional[Article]:
        """Replace the mutable fields of an article.

        Returns:
            The updated article, or None if no article has that id.
        """
        current = self.get_article(article_id)
        if current is None:
            return None

        updated = replace(
            current,
            title=draft.title,
            body=draft.body,
            source=draft.source,
            format=draft.format,
            category=draft.category,
            keywords=list(draft.keywords),
            attachments=list(draft.attachments),
        )
        self._swap([updated if a.id == article_id else a for a in self._articles])
        return updated

    def delete_article(self, article_id: str) -> bool:
        """Remove an article together with its memos."""
        remaining = [a for a in self._articles if a.id != article_id]
        if len(remaining) == len(self._articles):
            return False
        self._swap(remaining)
        return True

    def add_memo(self, article_id: str, content: str, is_summary: bool = False) -> Optional[Memo]:
        """Append a memo to an article."""
        article = self.get_article(article_id)
        if article is None:
            return None

        memo = Memo(
            id=self._new_memo_id(article),
            content=content,
            is_summary=is_summary,
            created_at=utc_now(),
        )
        self._replace_memos(article, [*article.memos, memo])
        return memo

    def update_memo(self, article_id: str, memo_id: str, new_content: str) -> Optional[Memo]:
        article = self.get_article(article_id)
        if article is None:
            return None
        memo = article.find_memo(memo_id)
        if memo is None:
            return None

        updated = replace(memo, content=new_content)
        self._replace_memos(article, [updated if m.id == memo_id else m for m in article.memos])
        return updated

    def delete_memo(self, article_id: str, memo_id: str) -> bool:
        article = self.get_article(article_id)
        if article is None or article.find_memo(memo_id) is None:
            return False

        self._replace_memos(article, [m for m in article.memos if m.id != memo_id])
        return True

    def _replace_memos(self, article: Article, memos: list[Memo]) -> None:
        updated = replace(article, memos=memos)
        self._swap([updated if a.id == article.id else a for a in self._articles])

    def _new_article_id(self) -> str:
        existing = {a.id for a in self._articles}
        while True:
            candidate = str(uuid.uuid4())
            if candidate not in existing:
                return candidate

    def _new_memo_id(self, article: Article) -> str:
        existing = {m.id for m in article.memos}
        while True:
            candidate = str(uuid.uuid4())
            if candidate not in existing:
                return candidate
