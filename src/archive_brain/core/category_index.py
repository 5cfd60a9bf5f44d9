"""Derived views over the article collection."""

from typing import Optional

from archive_brain.core.entities import Article, ArticleFilter, CategoryEntry, Memo


def build_category_index(articles: list[Article]) -> list[CategoryEntry]:
    """
    Map each category to the distinct keywords of its articles.

    Categories appear in first-encounter order; keywords within a category
    keep the order in which they were first seen. Matching is exact.

    Args:
        articles: Collection in storage order

    Returns:
        One entry per category
    """
    index: dict[str, dict[str, None]] = {}
    for article in articles:
        keywords = index.setdefault(article.category, {})
        for keyword in article.keywords:
            keywords.setdefault(keyword, None)

    return [CategoryEntry(category=c, keywords=list(kws)) for c, kws in index.items()]


def filter_articles(articles: list[Article], article_filter: Optional[ArticleFilter] = None) -> list[Article]:
    """
    Select articles by exact category or keyword, newest first.

    The sort is stable, so articles with equal timestamps keep their
    collection order.
    """
    if article_filter is None or article_filter.is_empty:
        selected = list(articles)
    elif article_filter.category is not None:
        selected = [a for a in articles if a.category == article_filter.category]
    else:
        selected = [a for a in articles if article_filter.keyword in a.keywords]

    return sorted(selected, key=lambda a: a.created_at, reverse=True)


def category_suggestions(articles: list[Article]) -> list[str]:
    """Distinct categories in first-encounter order."""
    return list(dict.fromkeys(a.category for a in articles))


def sort_memos_for_display(memos: list[Memo]) -> list[Memo]:
    """Newest memo first; storage keeps append order."""
    return sorted(memos, key=lambda m: m.created_at, reverse=True)


class CategoryIndex:
    """Memoized category index keyed on collection identity."""

    def __init__(self) -> None:
        self._source: Optional[list[Article]] = None
        self._entries: list[CategoryEntry] = []
        self.builds = 0

    def get(self, articles: list[Article]) -> list[CategoryEntry]:
        if articles is not self._source:
            self._entries = build_category_index(articles)
            self._source = articles
            self.builds += 1
        return self._entries
