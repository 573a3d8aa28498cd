"""
Orchestration for the catalog commands.

This module coordinates the workflows behind the CLI:
1. Discover and load content files
2. Lint the collection
3. Index the articles that passed
4. Render the requested outputs

Supports both progress bar and quiet modes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import AppConfig, normalize_extensions
from .index import build_index, write_json_index
from .lint import lint_articles
from .logging_utils import log_event, setup_logging
from .parser import FrontmatterError, iter_content_files, load_articles
from .renderer import render_html, render_markdown
from .types import Article, LintReport


@dataclass
class IndexResult:
    """Outcome of an index build.

    Attributes:
        json_path: Location of the JSON index
        outputs: Every file written, JSON first
        indexed: Number of articles in the index
        skipped: Slugs left out because they have lint errors
        report: The lint report the skip decision was based on
    """

    json_path: Path
    outputs: list[Path] = field(default_factory=list)
    indexed: int = 0
    skipped: list[str] = field(default_factory=list)
    report: LintReport = field(default_factory=LintReport)


def load_collection(
    content_dir: Path,
    cfg: AppConfig,
    show_progress: bool = False,
    console: Console | None = None,
) -> tuple[list[Article], list[tuple[Path, FrontmatterError]]]:
    """Load all content files, optionally with a progress bar."""
    logger = logging.getLogger("mdx_catalog")
    extensions = normalize_extensions(cfg.content.extensions)
    paths = list(iter_content_files(content_dir, extensions))
    log_event(logger, "Discovered content files", count=len(paths), content_dir=str(content_dir))

    if show_progress and paths:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Loading articles", total=len(paths))
            return load_articles(content_dir, extensions, on_loaded=lambda _: progress.advance(task))
    return load_articles(content_dir, extensions)


def print_report(report: LintReport, console: Console) -> None:
    if report.issues:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Article", no_wrap=True)
        table.add_column("Line", justify="right")
        table.add_column("Severity", no_wrap=True)
        table.add_column("Check", no_wrap=True)
        table.add_column("Message")
        for issue in report.issues:
            style = "red" if issue.severity == "error" else "yellow"
            table.add_row(
                escape(issue.slug),
                str(issue.line) if issue.line is not None else "",
                f"[{style}]{issue.severity}[/{style}]",
                issue.code,
                escape(issue.message),
            )
        console.print(table)

    summary = (
        f"Checked {report.checked} articles: "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )
    console.print(f"[green]{summary}[/green]" if report.ok else f"[red]{summary}[/red]")


def run_lint(
    content_dir: Path,
    cfg: AppConfig,
    console: Console | None = None,
    show_progress: bool = False,
    today: date | None = None,
) -> LintReport:
    """Lint every article under content_dir and print the findings."""
    console = console or Console()
    setup_logging(cfg.logging, None)
    articles, failures = load_collection(content_dir, cfg, show_progress=show_progress, console=console)
    report = lint_articles(articles, failures, cfg.lint, today=today)
    print_report(report, console)
    return report


def run_index(
    content_dir: Path,
    output_dir: Path,
    cfg: AppConfig,
    console: Console | None = None,
    show_progress: bool = False,
    today: date | None = None,
) -> IndexResult:
    """Build the site index for every article that lints without errors.

    Writes ``<filename>.json`` always, plus ``.html`` and ``.md`` listings
    when requested in ``cfg.index.formats``.
    """
    console = console or Console()
    logger = setup_logging(cfg.logging, output_dir)
    articles, failures = load_collection(content_dir, cfg, show_progress=show_progress, console=console)
    report = lint_articles(articles, failures, cfg.lint, today=today)

    broken = report.slugs_with_errors()
    indexable = [article for article in articles if article.slug not in broken]
    skipped = sorted(broken)
    for slug in skipped:
        log_event(logger, "Skipping article with lint errors", logging.WARNING, slug=slug)

    entries = build_index(indexable, cfg.index)
    json_path = write_json_index(entries, output_dir / f"{cfg.index.filename}.json")
    outputs = [json_path]

    formats = set(cfg.index.formats)
    if "html" in formats:
        html_path = output_dir / f"{cfg.index.filename}.html"
        render_html(entries, html_path, cfg.index.title)
        outputs.append(html_path)
    if "markdown" in formats:
        md_path = output_dir / f"{cfg.index.filename}.md"
        render_markdown(entries, md_path, cfg.index.title)
        outputs.append(md_path)

    log_event(
        logger,
        "Index written",
        indexed=len(entries),
        skipped=len(skipped),
        outputs=[str(path) for path in outputs],
    )
    return IndexResult(
        json_path=json_path,
        outputs=outputs,
        indexed=len(entries),
        skipped=skipped,
        report=report,
    )
