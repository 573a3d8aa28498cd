"""
Command-line interface for the content catalog.

Uses Typer to provide lint, index, tags and show commands over a directory
of Markdown/MDX articles.

Example:
    $ mdx-catalog lint content/
    $ mdx-catalog index content/ -o public/ --format html --format markdown
"""

from __future__ import annotations

from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import AppConfig, OutputFormat, load_config, normalize_extensions
from .index import group_tags
from .lint import lint_article
from .logging_utils import setup_logging
from .markdown import find_code_blocks, find_headings, reading_time, word_count
from .parser import FrontmatterError, iter_content_files, load_article
from .runner import load_collection, run_index, run_lint

app = typer.Typer(add_completion=False, help="Lint and index Markdown/MDX article collections.")
console = Console()


def _load_cfg(config: Path | None, log_level: str | None = None) -> AppConfig:
    try:
        cfg = load_config(str(config) if config else None)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as exc:
        console.print(f"[red]Invalid config {config}: {exc}[/red]")
        raise typer.Exit(code=2)
    if log_level:
        cfg.logging.level = log_level
    return cfg


def _content_dir(content_dir: Path | None, cfg: AppConfig) -> Path:
    path = content_dir or Path(cfg.content.directory)
    if not path.is_dir():
        console.print(f"[red]Content directory not found: {path}[/red]")
        raise typer.Exit(code=2)
    return path


@app.command()
def lint(
    content_dir: Path | None = typer.Argument(None, help="Directory holding the articles."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as failures."),
    progress: bool = typer.Option(False, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Check every article's frontmatter and Markdown body.

    Exits with code 1 when errors are found (or warnings, with --strict).
    """
    cfg = _load_cfg(config, log_level)
    directory = _content_dir(content_dir, cfg)
    report = run_lint(directory, cfg, console=console, show_progress=progress)
    if not report.ok or (strict and report.warnings):
        raise typer.Exit(code=1)


@app.command()
def index(
    content_dir: Path | None = typer.Argument(None, help="Directory holding the articles."),
    output: Path = typer.Option(Path("out"), "--output", "-o"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    formats: list[OutputFormat] | None = typer.Option(
        None, "--format", "-f", help="Output format: json, html or markdown. Repeatable."
    ),
    title: str | None = typer.Option(None, "--title", help="Title of the listing page."),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Build the site index for every article without lint errors."""
    cfg = _load_cfg(config, log_level)
    if formats:
        cfg.index.formats = [fmt.value for fmt in formats]
    if title:
        cfg.index.title = title
    if log_file is not None:
        cfg.logging.file = log_file
    directory = _content_dir(content_dir, cfg)

    result = run_index(directory, output, cfg, console=console, show_progress=progress)
    for slug in result.skipped:
        console.print(f"[yellow]Skipped {escape(slug)}: lint errors[/yellow]")
    if result.indexed == 0:
        console.print("[red]No articles could be indexed.[/red]")
        raise typer.Exit(code=1)
    console.print(f"Indexed {result.indexed} articles: {result.json_path}")


@app.command()
def tags(
    content_dir: Path | None = typer.Argument(None, help="Directory holding the articles."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """List tags with the number of articles using each."""
    cfg = _load_cfg(config)
    directory = _content_dir(content_dir, cfg)
    setup_logging(cfg.logging, None)
    articles, _ = load_collection(directory, cfg)
    tagged = group_tags((article.slug, article.tag_list) for article in articles)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Tag")
    table.add_column("Articles", justify="right")
    for tag, slugs in tagged.items():
        table.add_row(escape(tag), str(len(slugs)))
    console.print(table)


@app.command()
def show(
    slug: str = typer.Argument(..., help="Article slug (file name without extension)."),
    content_dir: Path | None = typer.Argument(None, help="Directory holding the articles."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """Print one article's metadata, headings and code blocks."""
    cfg = _load_cfg(config)
    setup_logging(cfg.logging, None)
    directory = _content_dir(content_dir, cfg)
    extensions = normalize_extensions(cfg.content.extensions)
    matches = [path for path in iter_content_files(directory, extensions) if path.stem == slug]
    if not matches:
        console.print(f"[red]No article with slug '{escape(slug)}'[/red]")
        raise typer.Exit(code=1)

    try:
        article = load_article(matches[0])
    except FrontmatterError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    meta = Table(show_header=False, box=None)
    meta.add_column(style="bold")
    meta.add_column()
    meta.add_row("Title", escape(article.title))
    meta.add_row("Published", escape(article.published_at))
    meta.add_row("Summary", escape(article.summary))
    meta.add_row("Tags", escape(", ".join(article.tag_list)))
    meta.add_row("Words", str(word_count(article.body)))
    meta.add_row("Reading time", f"{reading_time(article.body, cfg.index.words_per_minute)} min")
    meta.add_row("Source", escape(str(article.path)))
    console.print(meta)

    headings = find_headings(article.body, article.body_line)
    if headings:
        console.print("[bold]Headings[/bold]")
        for heading in headings:
            console.print(f"{'  ' * (heading.level - 1)}- {escape(heading.text)} [dim](line {heading.line})[/dim]")

    blocks = find_code_blocks(article.body, article.body_line)
    if blocks:
        console.print("[bold]Code blocks[/bold]")
        for block in blocks:
            end = block.end_line if block.terminated else "unterminated"
            console.print(f"- {block.language or 'plain'}: lines {block.start_line}-{end}")

    for issue in lint_article(article, cfg.lint):
        style = "red" if issue.severity == "error" else "yellow"
        console.print(f"[{style}]{issue.severity}[/{style}] {issue.code}: {escape(issue.message)}")


if __name__ == "__main__":
    app()
