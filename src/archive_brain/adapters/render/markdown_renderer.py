"""Markdown views of the archive."""

from typing import Optional

from archive_brain.core import (
    Article,
    ArticleFilter,
    ArticleFormat,
    CategoryEntry,
    Memo,
    is_youtube_url,
    sort_memos_for_display,
)

FORMAT_EMOJI = {
    ArticleFormat.NEWS: "📰",
    ArticleFormat.BLOG: "✍️",
    ArticleFormat.BOOK: "📚",
    ArticleFormat.PAPER: "📄",
    ArticleFormat.VIDEO: "🎬",
    ArticleFormat.PDF: "📑",
    ArticleFormat.OTHER: "📌",
}

PREVIEW_LENGTH = 150


class MarkdownRenderer:
    """Render list, detail and category views as markdown."""

    def render_list(
        self,
        articles: list[Article],
        categories: list[CategoryEntry],
        active_filter: Optional[ArticleFilter] = None,
    ) -> str:
        """Render the filtered article list with the category sidebar."""
        lines = ["# 🧠 Archive Brain", ""]

        if active_filter and active_filter.category is not None:
            lines.extend([f"Category: **{active_filter.category}**", ""])
        elif active_filter and active_filter.keyword is not None:
            lines.extend([f"Keyword: **#{active_filter.keyword}**", ""])

        if not articles:
            lines.extend(["No articles found.", ""])
        else:
            lines.extend([f"Articles: {len(articles)}", ""])
            for article in articles:
                lines.extend(self._format_card(article))

        lines.append(self.render_categories(categories))
        return "\n".join(lines)

    def render_categories(self, categories: list[CategoryEntry]) -> str:
        lines = ["## Categories", ""]
        if not categories:
            lines.append("_No categories yet._")
        for entry in categories:
            lines.append(f"- **{entry.category}**")
            for keyword in entry.keywords:
                lines.append(f"  - #{keyword}")
        lines.append("")
        return "\n".join(lines)

    def render_detail(self, article: Article) -> str:
        """Render a full article with attachments and its memo thread."""
        emoji = FORMAT_EMOJI.get(article.format, "📌")
        lines = [
            f"# {emoji} {article.title}",
            "",
            f"*{article.category} | {article.format.value} | {article.created_at.strftime('%Y-%m-%d %H:%M')}*",
            "",
            f"ID: `{article.id}`",
            "",
        ]

        if article.source:
            lines.extend([f"Source: <{article.source}>", ""])
            if article.format == ArticleFormat.VIDEO and is_youtube_url(article.source):
                lines.extend([f"▶️  Open on YouTube: {article.source}", ""])

        if article.keywords:
            lines.extend([" ".join(f"#{kw}" for kw in article.keywords), ""])

        lines.extend(["---", "", article.body or "_No body._", ""])

        if article.attachments:
            lines.extend(["## Attachments", ""])
            for attachment in article.attachments:
                kind = "image" if attachment.is_image else "file"
                lines.append(f"- {attachment.name} ({kind}, {attachment.mime_type})")
            lines.append("")

        lines.extend([f"## Memos ({len(article.memos)})", ""])
        if not article.memos:
            lines.extend(["_No memos yet._", ""])
        for memo in sort_memos_for_display(article.memos):
            lines.extend(self._format_memo(memo))

        return "\n".join(lines)

    def _format_card(self, article: Article) -> list[str]:
        """Format single list entry."""
        emoji = FORMAT_EMOJI.get(article.format, "📌")
        preview = article.body.replace("\n", " ")
        if len(preview) > PREVIEW_LENGTH:
            preview = preview[:PREVIEW_LENGTH] + "..."

        lines = [
            f"### {emoji} {article.title}",
            "",
            f"*{article.category} | {article.created_at.strftime('%Y-%m-%d')} | memos: {len(article.memos)}*",
            "",
        ]
        if preview:
            lines.extend([preview, ""])
        if article.keywords:
            lines.extend([" ".join(f"#{kw}" for kw in article.keywords), ""])
        lines.extend([f"`{article.id}`", "", "---", ""])
        return lines

    def _format_memo(self, memo: Memo) -> list[str]:
        label = "✨ AI summary" if memo.is_summary else "📝 Memo"
        return [
            f"**{label}** · {memo.created_at.strftime('%Y-%m-%d %H:%M')} · `{memo.id}`",
            "",
            memo.content,
            "",
        ]
