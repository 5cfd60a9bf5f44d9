"""Business logic use cases."""

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from archive_brain.config import AttachmentsConfig, MessagesConfig
from archive_brain.core import (
    Article,
    ArticleDraft,
    ArticleFormat,
    ArticleStore,
    Attachment,
    AttachmentRejected,
    Memo,
    Summarizer,
    ValidationError,
)

BODY_SUMMARY_MIN_LENGTH = 100
SELECTION_MIN_LENGTH = 10


def parse_keywords(text: str) -> list[str]:
    """Split comma-separated keywords, dropping blanks."""
    return [kw.strip() for kw in text.split(",") if kw.strip()]


def append_paragraph(body: str, text: str) -> str:
    """Append text to body, separated by a blank line when body is non-empty."""
    return (body + "\n\n" if body else "") + text


@dataclass
class IntakeResult:
    """Outcome of processing a batch of attachment files."""

    body: str
    attachments: list[Attachment] = field(default_factory=list)
    rejected: list[AttachmentRejected] = field(default_factory=list)


class ArticleFormService:
    """Service behind the create/edit form."""

    def __init__(
        self,
        store: ArticleStore,
        summarizer: Summarizer,
        attachments_config: Optional[AttachmentsConfig] = None,
        messages: Optional[MessagesConfig] = None,
    ) -> None:
        self.store = store
        self.summarizer = summarizer
        self.attachments_config = attachments_config or AttachmentsConfig()
        self.messages = messages or MessagesConfig()

    def build_draft(
        self,
        title: str,
        category: str,
        body: str = "",
        source: str = "",
        format: ArticleFormat = ArticleFormat.NEWS,
        keywords: str = "",
        attachments: Optional[list[Attachment]] = None,
    ) -> ArticleDraft:
        """Validate form input into a draft.

        Raises:
            ValidationError: if title or category is blank.
        """
        return ArticleDraft(
            title=title,
            category=category,
            body=body,
            source=source,
            format=format,
            keywords=parse_keywords(keywords),
            attachments=list(attachments or []),
        )

    def save(self, draft: ArticleDraft, article_id: Optional[str] = None) -> Optional[Article]:
        """Create a new article, or update an existing one when article_id is given."""
        if article_id is None:
            return self.store.create_article(draft)
        return self.store.update_article(article_id, draft)

    def check_attachment(self, name: str, mime_type: str, size: int) -> None:
        """Reject files over the size cap or of an unsupported type.

        Raises:
            AttachmentRejected: if the file fails the gate.
        """
        max_size = self.attachments_config.max_size_bytes
        if size > max_size:
            limit_mb = max_size / (1024 * 1024)
            raise AttachmentRejected(name, f"file exceeds the {limit_mb:g} MB limit and cannot be attached")
        if mime_type not in self.attachments_config.allowed_mime_types:
            raise AttachmentRejected(name, f"unsupported file type '{mime_type}'")

    def read_attachment(self, path: Path) -> tuple[Attachment, bytes]:
        """Gate and read a file from disk.

        Raises:
            AttachmentRejected: if the file is missing, too large or of an
                unsupported type.
        """
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            size = path.stat().st_size
        except OSError as e:
            raise AttachmentRejected(path.name, f"cannot read file ({e.strerror or e})") from e

        self.check_attachment(path.name, mime_type, size)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise AttachmentRejected(path.name, f"cannot read file ({e.strerror or e})") from e
        return Attachment.from_bytes(path.name, mime_type, data), data

    async def ingest_files(self, paths: list[Path], body: str = "") -> IntakeResult:
        """Attach files one at a time in order, appending AI output to the body.

        Each file is fully processed, including its remote call, before the
        next one starts. Rejected files are reported and skipped.
        """
        result = IntakeResult(body=body)

        for i, path in enumerate(paths, 1):
            try:
                attachment, data = self.read_attachment(path)
            except AttachmentRejected as e:
                print(f"  ✗ Skipped {e}")
                result.rejected.append(e)
                continue

            result.attachments.append(attachment)

            if attachment.is_image or attachment.mime_type == "application/pdf":
                action = "Extracting text from" if attachment.is_image else "Summarizing"
                print(f"  [{i}/{len(paths)}] {action} '{attachment.name}'...")

                content = await self.summarizer.extract_or_summarize_file(data, attachment.mime_type)
                if content and content.strip():
                    result.body = append_paragraph(result.body, content.strip())

        return result

    async def summarize_body(self, body: str) -> str:
        """Append an AI summary to a long enough body."""
        if len(body.strip()) <= BODY_SUMMARY_MIN_LENGTH:
            return body

        summary = await self.summarizer.summarize(body)
        return f"{body}\n\n{self.messages.body_summary_header}\n{summary}"


class MemoService:
    """Service for the memo thread of an article."""

    def __init__(self, store: ArticleStore, summarizer: Summarizer) -> None:
        self.store = store
        self.summarizer = summarizer

    def add_memo(self, article_id: str, content: str) -> Optional[Memo]:
        if not content.strip():
            raise ValidationError("Memo cannot be empty")
        return self.store.add_memo(article_id, content, is_summary=False)

    def update_memo(self, article_id: str, memo_id: str, content: str) -> Optional[Memo]:
        if not content.strip():
            raise ValidationError("Memo cannot be empty")
        return self.store.update_memo(article_id, memo_id, content)

    def delete_memo(self, article_id: str, memo_id: str) -> bool:
        return self.store.delete_memo(article_id, memo_id)

    async def summarize_selection(self, article_id: str, selection: Optional[str] = None) -> Optional[Memo]:
        """Summarize selected text (the whole body by default) into a summary memo.

        Returns:
            The new memo, or None if the article does not exist.
        """
        article = self.store.get_article(article_id)
        if article is None:
            return None

        text = article.body if selection is None else selection
        if not text.strip():
            raise ValidationError("Nothing selected to summarize")
        if selection is not None and len(selection.strip()) <= SELECTION_MIN_LENGTH:
            raise ValidationError(
                f"Selection is too short to summarize (more than {SELECTION_MIN_LENGTH} characters needed)"
            )

        summary = await self.summarizer.summarize(text)

        # The article may have been deleted while the call was in flight
        return self.store.add_memo(article_id, summary, is_summary=True)
