"""
Site index generation.

Turns parsed articles into ``IndexEntry`` records sorted newest first, builds
a tag index, and writes everything to a single JSON file that a static site
can read directly.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timezone
import json
from pathlib import Path
from typing import Any, Iterable

from .config import IndexConfig
from .markdown import find_headings, reading_time, word_count
from .types import Article, IndexEntry, parse_published_at


def build_entry(article: Article, cfg: IndexConfig) -> IndexEntry:
    published = article.published_date
    return IndexEntry(
        slug=article.slug,
        title=article.title,
        published_at=published.isoformat() if published else article.published_at,
        summary=article.summary,
        tags=article.tag_list,
        reading_time=reading_time(article.body, cfg.words_per_minute),
        word_count=word_count(article.body),
        headings=[heading.text for heading in find_headings(article.body)],
    )


def build_index(articles: list[Article], cfg: IndexConfig) -> list[IndexEntry]:
    """Build index entries, newest first.

    Ties are broken by slug. Entries whose date does not parse go last.
    """
    entries = [build_entry(article, cfg) for article in articles]
    dated = [entry for entry in entries if _entry_date(entry) is not None]
    undated = [entry for entry in entries if _entry_date(entry) is None]
    dated.sort(key=lambda entry: entry.slug)
    dated.sort(key=lambda entry: _entry_date(entry), reverse=True)
    undated.sort(key=lambda entry: entry.slug)
    return dated + undated


def _entry_date(entry: IndexEntry) -> date | None:
    return parse_published_at(entry.published_at)


def group_tags(tagged: Iterable[tuple[str, list[str]]]) -> dict[str, list[str]]:
    """Map each tag to the slugs using it, most used tags first.

    Tags are matched case-insensitively; the first spelling seen is kept.
    """
    spellings: dict[str, str] = {}
    slugs: dict[str, list[str]] = defaultdict(list)
    for slug, tags in tagged:
        for tag in tags:
            folded = tag.casefold()
            spellings.setdefault(folded, tag)
            if slug not in slugs[folded]:
                slugs[folded].append(slug)
    ordered = sorted(slugs.items(), key=lambda item: (-len(item[1]), item[0]))
    return {spellings[folded]: items for folded, items in ordered}


def tag_index(entries: list[IndexEntry]) -> dict[str, list[str]]:
    return group_tags((entry.slug, entry.tags) for entry in entries)


def index_payload(entries: list[IndexEntry]) -> dict[str, Any]:
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "count": len(entries),
        "articles": [entry.to_dict() for entry in entries],
        "tags": tag_index(entries),
    }


def write_json_index(entries: list[IndexEntry], path: Path) -> Path:
    """Write the index as UTF-8 JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = index_payload(entries)
    path.write_text(f"{json.dumps(payload, ensure_ascii=False, indent=2)}\n", encoding="utf-8")
    return path
