"""
Content linting for article collections.

Per-article checks cover the frontmatter fields, the publication date and
the Markdown body. Collection checks catch slug collisions and near-duplicate
titles, using the same rapidfuzz ratio approach as feed deduplication.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from pathlib import Path

from rapidfuzz import fuzz

from .config import LintConfig
from .markdown import find_code_blocks
from .parser import KNOWN_KEYS, FrontmatterError
from .types import ERROR, WARNING, Article, Issue, LintReport


def _field_value(article: Article, key: str) -> str:
    attr = KNOWN_KEYS.get(key)
    if attr is not None:
        return getattr(article, attr)
    return article.extra.get(key, "")


def lint_article(article: Article, cfg: LintConfig, today: date | None = None) -> list[Issue]:
    """Check a single article.

    Args:
        article: Parsed article
        cfg: Lint settings
        today: Reference date for the future-date check (defaults to today)

    Returns:
        Issues found, in source order
    """
    issues: list[Issue] = []

    def add(code: str, severity: str, message: str, line: int | None = None) -> None:
        issues.append(Issue(code=code, severity=severity, message=message, slug=article.slug, line=line))

    for key in cfg.required_fields:
        if key not in article.fields:
            add("missing-field", ERROR, f"frontmatter is missing '{key}'", 1)
        elif not _field_value(article, key).strip():
            add("empty-field", ERROR, f"frontmatter field '{key}' is empty", 1)

    if article.published_at.strip():
        published = article.published_date
        if published is None:
            add("invalid-date", ERROR, f"publishedAt '{article.published_at}' is not a valid ISO date", 1)
        elif cfg.check_future_dates and published > (today or date.today()):
            add("future-date", WARNING, f"publishedAt {published.isoformat()} is in the future", 1)

    if cfg.warn_unknown_fields:
        allowed = set(cfg.known_fields) | set(cfg.required_fields)
        for key in article.fields:
            if key not in allowed:
                add("unknown-field", WARNING, f"unknown frontmatter field '{key}'", 1)

    seen_tags: set[str] = set()
    for tag in article.tag_list:
        folded = tag.casefold()
        if folded in seen_tags:
            add("duplicate-tag", WARNING, f"tag '{tag}' is listed more than once", 1)
        seen_tags.add(folded)

    if cfg.max_summary_chars and len(article.summary) > cfg.max_summary_chars:
        add(
            "summary-too-long",
            WARNING,
            f"summary is {len(article.summary)} characters (limit {cfg.max_summary_chars})",
            1,
        )

    if not article.body.strip():
        add("empty-body", ERROR, "article body is empty", article.body_line)
        return issues

    for block in find_code_blocks(article.body, article.body_line):
        if not block.terminated:
            add("unterminated-fence", ERROR, f"code fence '{block.fence}' is never closed", block.start_line)
        if cfg.require_code_language and not block.language:
            add("missing-code-language", WARNING, "code block has no language hint", block.start_line)

    return issues


def lint_collection(articles: list[Article], cfg: LintConfig) -> list[Issue]:
    """Checks that need the whole collection: slug clashes and similar titles."""
    issues: list[Issue] = []

    by_slug: dict[str, list[Article]] = defaultdict(list)
    for article in articles:
        by_slug[article.slug].append(article)
    for slug, group in by_slug.items():
        if len(group) < 2:
            continue
        sources = ", ".join(str(item.path or item.slug) for item in group)
        issues.append(
            Issue(
                code="duplicate-slug",
                severity=ERROR,
                message=f"slug is used by {len(group)} files: {sources}",
                slug=slug,
            )
        )

    seen: list[Article] = []
    for article in articles:
        title = article.title.strip()
        if not title:
            continue
        for existing in seen:
            if existing.slug == article.slug:
                continue
            score = fuzz.ratio(title.casefold(), existing.title.strip().casefold())
            if score >= cfg.title_similarity_threshold:
                issues.append(
                    Issue(
                        code="similar-title",
                        severity=WARNING,
                        message=f"title is {score:.0f}% similar to '{existing.slug}'",
                        slug=article.slug,
                        line=1,
                    )
                )
                break
        seen.append(article)

    return issues


def failure_issue(path: Path, exc: FrontmatterError) -> Issue:
    return Issue(code="frontmatter", severity=ERROR, message=exc.message, slug=path.stem, line=exc.line)


def lint_articles(
    articles: list[Article],
    failures: list[tuple[Path, FrontmatterError]],
    cfg: LintConfig,
    today: date | None = None,
) -> LintReport:
    """Lint a loaded collection, including files that failed to parse."""
    issues = [failure_issue(path, exc) for path, exc in failures]
    for article in articles:
        issues.extend(lint_article(article, cfg, today=today))
    issues.extend(lint_collection(articles, cfg))
    issues.sort(key=lambda issue: (issue.slug, issue.line or 0))
    return LintReport(checked=len(articles) + len(failures), issues=issues)
