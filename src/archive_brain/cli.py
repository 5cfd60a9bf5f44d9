"""CLI entry point for archive brain."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

import typer

from archive_brain.adapters.llm import ClaudeSummarizer
from archive_brain.adapters.render import MarkdownRenderer
from archive_brain.adapters.storage import JsonFileStorage
from archive_brain.config import Settings, get_settings
from archive_brain.core import (
    Article,
    ArticleFilter,
    ArticleFormat,
    ArticleStore,
    Attachment,
    CategoryIndex,
    Summarizer,
    ValidationError,
    category_suggestions,
    filter_articles,
)
from archive_brain.use_cases import ArticleFormService, MemoService

app = typer.Typer(
    name="archive-brain",
    help="Archive articles, keep memos on them and summarize with AI.",
    no_args_is_help=True,
)
memo_app = typer.Typer(help="Manage the memo thread of an article.")
app.add_typer(memo_app, name="memo")


@dataclass
class AppContext:
    """Objects shared by all commands of one invocation."""

    settings: Settings
    store: ArticleStore
    summarizer: Summarizer
    index: CategoryIndex
    renderer: MarkdownRenderer

    @property
    def form_service(self) -> ArticleFormService:
        return ArticleFormService(
            self.store,
            self.summarizer,
            attachments_config=self.settings.attachments,
            messages=self.settings.messages,
        )

    @property
    def memo_service(self) -> MemoService:
        return MemoService(self.store, self.summarizer)


def build_context(settings: Settings) -> AppContext:
    """Wire the store, gateway and views from settings."""
    store = ArticleStore(JsonFileStorage(settings.data_dir), storage_key=settings.articles_key)
    store.load()
    return AppContext(
        settings=settings,
        store=store,
        summarizer=ClaudeSummarizer(settings),
        index=CategoryIndex(),
        renderer=MarkdownRenderer(),
    )


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", envvar="ARCHIVE_BRAIN_DATA_DIR", help="Directory holding the archive"
    ),
    config: Path = typer.Option(Path("config.yaml"), "--config", help="YAML config file"),
) -> None:
    """Archive articles, keep memos on them and summarize with AI."""
    settings = get_settings(config)
    if data_dir is not None:
        settings.paths.data_dir = data_dir
    ctx.obj = build_context(settings)


def _fail(message: str) -> NoReturn:
    typer.echo(f"❌ {message}", err=True)
    raise typer.Exit(code=1)


def _require_article(app_ctx: AppContext, article_id: str) -> Article:
    article = app_ctx.store.get_article(article_id)
    if article is None:
        _fail(f"Article not found: {article_id}")
    return article


@app.command("list")
def list_articles(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Show one category"),
    keyword: Optional[str] = typer.Option(None, "--keyword", "-k", help="Show one keyword"),
) -> None:
    """List articles, newest first."""
    app_ctx: AppContext = ctx.obj
    # An empty value means no filter
    category = category or None
    keyword = keyword or None
    if category is not None and keyword is not None:
        _fail("Filter by --category or --keyword, not both")

    if category is not None:
        article_filter = ArticleFilter.by_category(category)
    elif keyword is not None:
        article_filter = ArticleFilter.by_keyword(keyword)
    else:
        article_filter = ArticleFilter.none()

    articles = app_ctx.store.articles
    typer.echo(
        app_ctx.renderer.render_list(
            filter_articles(articles, article_filter),
            app_ctx.index.get(articles),
            article_filter,
        )
    )


@app.command()
def categories(ctx: typer.Context) -> None:
    """Show categories with the keywords used in each."""
    app_ctx: AppContext = ctx.obj
    typer.echo(app_ctx.renderer.render_categories(app_ctx.index.get(app_ctx.store.articles)))


@app.command()
def show(ctx: typer.Context, article_id: str = typer.Argument(..., help="Article ID")) -> None:
    """Show an article with its attachments and memos."""
    app_ctx: AppContext = ctx.obj
    typer.echo(app_ctx.renderer.render_detail(_require_article(app_ctx, article_id)))


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", "-t", help="Article title"),
    category: str = typer.Option(..., "--category", "-c", help="Category"),
    source: str = typer.Option("", "--source", "-s", help="Source URL"),
    format: ArticleFormat = typer.Option(ArticleFormat.NEWS, "--format", "-f", help="Material format"),
    keywords: str = typer.Option("", "--keywords", "-k", help="Comma-separated keywords"),
    body: str = typer.Option("", "--body", "-b", help="Body text"),
    attach: Optional[list[Path]] = typer.Option(None, "--attach", "-a", help="Image or PDF to attach (repeatable)"),
    summarize_body: bool = typer.Option(False, "--summarize-body", help="Append an AI summary of the body"),
) -> None:
    """Create a new article."""
    app_ctx: AppContext = ctx.obj
    service = app_ctx.form_service

    known = category_suggestions(app_ctx.store.articles)
    if category not in known and known:
        typer.echo(f"• New category '{category}' (existing: {', '.join(known)})")

    try:
        # Validate before spending any API calls
        service.build_draft(title=title, category=category)
        body, attachments = _process_body(service, body, attach or [], [], summarize_body)
        draft = service.build_draft(
            title=title,
            category=category,
            body=body,
            source=source,
            format=format,
            keywords=keywords,
            attachments=attachments,
        )
    except ValidationError as e:
        _fail(str(e))

    article = service.save(draft)
    typer.echo(f"✓ Article saved: {article.id}")


@app.command()
def edit(
    ctx: typer.Context,
    article_id: str = typer.Argument(..., help="Article ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    category: Optional[str] = typer.Option(None, "--category", "-c"),
    source: Optional[str] = typer.Option(None, "--source", "-s"),
    format: Optional[ArticleFormat] = typer.Option(None, "--format", "-f"),
    keywords: Optional[str] = typer.Option(None, "--keywords", "-k", help="Comma-separated keywords"),
    body: Optional[str] = typer.Option(None, "--body", "-b"),
    attach: Optional[list[Path]] = typer.Option(None, "--attach", "-a", help="Image or PDF to attach (repeatable)"),
    clear_attachments: bool = typer.Option(False, "--clear-attachments", help="Drop existing attachments"),
    summarize_body: bool = typer.Option(False, "--summarize-body", help="Append an AI summary of the body"),
) -> None:
    """Edit an article. Options left out keep their current values."""
    app_ctx: AppContext = ctx.obj
    service = app_ctx.form_service
    current = _require_article(app_ctx, article_id)

    new_title = current.title if title is None else title
    new_category = current.category if category is None else category
    existing = [] if clear_attachments else list(current.attachments)

    try:
        service.build_draft(title=new_title, category=new_category)
        new_body, attachments = _process_body(
            service,
            current.body if body is None else body,
            attach or [],
            existing,
            summarize_body,
        )
        draft = service.build_draft(
            title=new_title,
            category=new_category,
            body=new_body,
            source=current.source if source is None else source,
            format=current.format if format is None else format,
            keywords=", ".join(current.keywords) if keywords is None else keywords,
            attachments=attachments,
        )
    except ValidationError as e:
        _fail(str(e))

    if service.save(draft, article_id) is None:
        _fail(f"Article not found: {article_id}")
    typer.echo(f"✓ Article updated: {article_id}")


def _process_body(
    service: ArticleFormService,
    body: str,
    paths: list[Path],
    attachments: list[Attachment],
    summarize_body: bool,
) -> tuple[str, list[Attachment]]:
    """Run attachment intake and the optional body summary."""
    if paths:
        typer.echo(f"📎 Processing {len(paths)} file(s)...")
        result = asyncio.run(service.ingest_files(paths, body))
        body = result.body
        attachments = [*attachments, *result.attachments]
        if result.rejected:
            typer.echo(f"⚠️  {len(result.rejected)} file(s) were not attached")

    if summarize_body:
        body = asyncio.run(service.summarize_body(body))

    return body, attachments


@app.command()
def delete(
    ctx: typer.Context,
    article_id: str = typer.Argument(..., help="Article ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete an article and all its memos."""
    app_ctx: AppContext = ctx.obj
    article = _require_article(app_ctx, article_id)

    if not yes and not typer.confirm(f"Really delete '{article.title}'?"):
        typer.echo("Cancelled.")
        raise typer.Exit()

    app_ctx.store.delete_article(article_id)
    typer.echo(f"✓ Article deleted: {article_id}")


@app.command()
def summarize(
    ctx: typer.Context,
    article_id: str = typer.Argument(..., help="Article ID"),
    text: Optional[str] = typer.Option(None, "--text", help="Selected passage (default: whole body)"),
) -> None:
    """Summarize a passage with AI and keep the result as a memo."""
    app_ctx: AppContext = ctx.obj
    _require_article(app_ctx, article_id)

    typer.echo("✨ Summarizing...")
    try:
        memo = asyncio.run(app_ctx.memo_service.summarize_selection(article_id, text))
    except ValidationError as e:
        _fail(str(e))

    if memo is None:
        _fail(f"Article not found: {article_id}")
    typer.echo(memo.content)
    typer.echo(f"✓ Summary memo added: {memo.id}")


@app.command("export-attachment")
def export_attachment(
    ctx: typer.Context,
    article_id: str = typer.Argument(..., help="Article ID"),
    name: str = typer.Argument(..., help="Attachment file name"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination path"),
) -> None:
    """Write an attachment back to disk."""
    app_ctx: AppContext = ctx.obj
    article = _require_article(app_ctx, article_id)

    attachment = next((a for a in article.attachments if a.name == name), None)
    if attachment is None:
        _fail(f"Attachment not found: {name}")

    try:
        data = attachment.decode()
    except ValueError as e:
        _fail(str(e))

    destination = output or Path(name)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)
    typer.echo(f"✓ Saved {destination}")


@memo_app.command("add")
def memo_add(
    ctx: typer.Context,
    article_id: str = typer.Argument(..., help="Article ID"),
    content: str = typer.Argument(..., help="Memo text"),
) -> None:
    """Add a memo to an article."""
    app_ctx: AppContext = ctx.obj
    try:
        memo = app_ctx.memo_service.add_memo(article_id, content)
    except ValidationError as e:
        _fail(str(e))

    if memo is None:
        _fail(f"Article not found: {article_id}")
    typer.echo(f"✓ Memo added: {memo.id}")


@memo_app.command("edit")
def memo_edit(
    ctx: typer.Context,
    article_id: str = typer.Argument(..., help="Article ID"),
    memo_id: str = typer.Argument(..., help="Memo ID"),
    content: str = typer.Argument(..., help="New memo text"),
) -> None:
    """Replace the text of a memo."""
    app_ctx: AppContext = ctx.obj
    try:
        memo = app_ctx.memo_service.update_memo(article_id, memo_id, content)
    except ValidationError as e:
        _fail(str(e))

    if memo is None:
        _fail(f"Memo not found: {article_id}/{memo_id}")
    typer.echo(f"✓ Memo updated: {memo_id}")


@memo_app.command("rm")
def memo_rm(
    ctx: typer.Context,
    article_id: str = typer.Argument(..., help="Article ID"),
    memo_id: str = typer.Argument(..., help="Memo ID"),
) -> None:
    """Delete a memo."""
    app_ctx: AppContext = ctx.obj
    if not app_ctx.memo_service.delete_memo(article_id, memo_id):
        _fail(f"Memo not found: {article_id}/{memo_id}")
    typer.echo(f"✓ Memo deleted: {memo_id}")


if __name__ == "__main__":
    app()
