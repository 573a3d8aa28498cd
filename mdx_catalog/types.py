"""
Core data types for the content catalog.

This module defines the structures shared by every stage:
- Article: one content document parsed from frontmatter + Markdown body
- CodeBlock / Heading: pieces of the Markdown body
- Issue / LintReport: findings produced by the linter
- IndexEntry: the site-index projection of an article
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
import re
from pathlib import Path
from typing import Any


ERROR = "error"
WARNING = "warning"

# YYYY-MM-DD, optionally followed by a time
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(?:T.*)?$")


def parse_published_at(value: str) -> date | None:
    """Parse a publishedAt string into a calendar date.

    Accepts ``YYYY-MM-DD`` and full ISO 8601 datetimes (a trailing ``Z`` is
    allowed). Returns None if the value is not a valid calendar date.
    """
    raw = (value or "").strip()
    if not ISO_DATE_RE.match(raw):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


@dataclass
class Article:
    """A content document parsed from a Markdown/MDX file.

    Attributes:
        slug: File stem, unique per collection
        title: Article headline
        published_at: Raw publishedAt frontmatter value
        summary: Short description used in listings
        tags: Raw comma-separated tags string
        body: Markdown text following the frontmatter block
        path: Source file, if loaded from disk
        body_line: 1-based source line where the body starts
        fields: Frontmatter keys present in the source, in order
        extra: Frontmatter keys outside the known set
    """
    slug: str
    title: str = ""
    published_at: str = ""
    summary: str = ""
    tags: str = ""
    body: str = ""
    path: Path | None = None
    body_line: int = 1
    fields: list[str] = field(default_factory=list)
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def tag_list(self) -> list[str]:
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]

    @property
    def published_date(self) -> date | None:
        return parse_published_at(self.published_at)


@dataclass
class CodeBlock:
    """A fenced code block in an article body.

    ``end_line`` is None when the fence is never closed.
    """
    language: str | None
    code: str
    start_line: int
    end_line: int | None
    fence: str

    @property
    def terminated(self) -> bool:
        return self.end_line is not None


@dataclass
class Heading:
    level: int
    text: str
    line: int


@dataclass
class Issue:
    """A single lint finding."""
    code: str
    severity: str
    message: str
    slug: str
    line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
            "slug": self.slug,
            "line": self.line,
        }


@dataclass
class LintReport:
    checked: int = 0
    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def slugs_with_errors(self) -> set[str]:
        return {issue.slug for issue in self.errors}


@dataclass
class IndexEntry:
    """Site-index record for one article.

    Attributes:
        slug: Article slug
        title: Article title
        published_at: ISO date string, or the raw value if it does not parse
        summary: Listing summary
        tags: Parsed tag list
        reading_time: Estimated minutes to read the prose
        word_count: Prose word count, code excluded
        headings: Heading texts in document order
    """
    slug: str
    title: str
    published_at: str
    summary: str
    tags: list[str] = field(default_factory=list)
    reading_time: int = 0
    word_count: int = 0
    headings: list[str] = field(default_factory=list)

    @property
    def year(self) -> str:
        published = parse_published_at(self.published_at)
        return str(published.year) if published else "Undated"

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "publishedAt": self.published_at,
            "summary": self.summary,
            "tags": list(self.tags),
            "readingTime": self.reading_time,
            "wordCount": self.word_count,
            "headings": list(self.headings),
        }
