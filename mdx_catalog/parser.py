"""
Frontmatter parser for Markdown/MDX content files.

Each file holds one article:

    ---
    title: Building Portlets with Vue
    publishedAt: 2023-04-12
    summary: How we ship Vue apps inside Liferay DXP.
    tags: vue, liferay, portlets
    ---
    Markdown body...

The block between the ``---`` lines is read with a YAML safe loader that keeps
dates as written, and every value is normalized to a plain string.
"""

from __future__ import annotations

from datetime import date, datetime
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

import yaml

from .types import Article


logger = logging.getLogger(__name__)

DELIMITER = "---"
KNOWN_KEYS = {"title": "title", "publishedAt": "published_at", "summary": "summary", "tags": "tags"}


class _TextLoader(yaml.SafeLoader):
    """Safe loader that leaves dates and timestamps as the strings written."""


_TextLoader.yaml_implicit_resolvers = {
    first: [resolver for resolver in resolvers if resolver[0] != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class FrontmatterError(ValueError):
    """Raised when a content file has no usable frontmatter block."""

    def __init__(self, message: str, path: Path | None = None, line: int | None = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self) -> str:
        location = str(self.path) if self.path else "<text>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message}"


def split_frontmatter(text: str) -> tuple[str, str, int]:
    """Split a document into its frontmatter block and body.

    Args:
        text: Full file content

    Returns:
        A tuple of (raw frontmatter block, body, 1-based line where the body starts)

    Raises:
        FrontmatterError: If the opening or closing delimiter is missing
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        raise FrontmatterError("file does not start with a '---' frontmatter block", line=1)

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == DELIMITER:
            raw = "".join(lines[1:idx])
            body = "".join(lines[idx + 1:])
            return raw, body, idx + 2

    raise FrontmatterError("frontmatter block is never closed with '---'", line=1)


def parse_frontmatter(raw: str) -> dict[str, str]:
    """Parse a frontmatter block into a mapping of plain strings.

    Raises:
        FrontmatterError: On invalid YAML, a non-mapping block, or nested values
    """
    try:
        data = yaml.load(raw, Loader=_TextLoader)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        # The block starts on line 2 of the file
        line = mark.line + 2 if mark is not None else None
        problem = getattr(exc, "problem", None) or "invalid YAML"
        raise FrontmatterError(f"invalid frontmatter: {problem}", line=line) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError("frontmatter must be a set of key: value pairs", line=2)

    return {str(key): _to_text(str(key), value) for key, value in data.items()}


def _to_text(key: str, value: Any) -> str:
    """Normalize a YAML scalar back into the text the author wrote."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ", ".join(_to_text(key, item) for item in value if item is not None)
    if isinstance(value, dict):
        raise FrontmatterError(f"field '{key}' must be plain text, not a mapping")
    return str(value).strip()


def parse_article(text: str, slug: str, path: Path | None = None) -> Article:
    """Parse a full document into an Article.

    Missing fields are left empty; reporting them is the linter's job.
    """
    try:
        raw, body, body_line = split_frontmatter(text)
        meta = parse_frontmatter(raw)
    except FrontmatterError as exc:
        exc.path = path
        raise

    values = {attr: meta.get(key, "") for key, attr in KNOWN_KEYS.items()}
    extra = {key: value for key, value in meta.items() if key not in KNOWN_KEYS}
    return Article(
        slug=slug,
        body=body,
        path=path,
        body_line=body_line,
        fields=list(meta.keys()),
        extra=extra,
        **values,
    )


def load_article(path: Path) -> Article:
    text = path.read_text(encoding="utf-8")
    return parse_article(text, slug=path.stem, path=path)


def iter_content_files(content_dir: Path, extensions: Iterable[str]) -> Iterator[Path]:
    """Yield content files under a directory, sorted by path.

    Hidden files and anything inside hidden directories are skipped.
    """
    if not content_dir.is_dir():
        raise FileNotFoundError(f"Content directory not found: {content_dir}")
    suffixes = {ext.lower() for ext in extensions}
    for path in sorted(content_dir.rglob("*")):
        relative = path.relative_to(content_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file() and path.suffix.lower() in suffixes:
            yield path


def _read_article(path: Path) -> Article:
    """load_article, with decoding and I/O errors reported as FrontmatterError."""
    try:
        return load_article(path)
    except UnicodeDecodeError as exc:
        raise FrontmatterError(f"file is not valid UTF-8: {exc.reason}", path=path) from exc
    except OSError as exc:
        raise FrontmatterError(f"file could not be read: {exc.strerror or exc}", path=path) from exc


def load_articles(
    content_dir: Path,
    extensions: Iterable[str],
    on_loaded: Callable[[Path], None] | None = None,
) -> tuple[list[Article], list[tuple[Path, FrontmatterError]]]:
    """Load every article under a directory.

    Returns:
        A tuple of (articles, failures). Files that cannot be read, decoded
        or parsed are reported in failures instead of aborting the load.
        on_loaded, if given, is called with each path once it is processed.
    """
    articles: list[Article] = []
    failures: list[tuple[Path, FrontmatterError]] = []
    for path in iter_content_files(content_dir, extensions):
        try:
            articles.append(_read_article(path))
        except FrontmatterError as exc:
            logger.warning("Failed to load %s: %s", path, exc.message)
            failures.append((path, exc))
        if on_loaded is not None:
            on_loaded(path)
    return articles, failures
