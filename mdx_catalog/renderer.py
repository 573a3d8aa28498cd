from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .index import tag_index
from .types import IndexEntry


def _slugify(value: str) -> str:
    lowered = value.strip().lower()
    cleaned = []
    last_dash = False
    for ch in lowered:
        if ch.isalnum():
            cleaned.append(ch)
            last_dash = False
        else:
            if not last_dash:
                cleaned.append("-")
                last_dash = True
    slug = "".join(cleaned).strip("-")
    return slug or "section"


def _group_by_year(entries: list[IndexEntry]) -> list[tuple[str, list[IndexEntry]]]:
    """Group entries by year, newest year first, keeping index order inside each year."""
    grouped: dict[str, list[IndexEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.year].append(entry)
    dated = sorted((item for item in grouped.items() if item[0] != "Undated"), key=lambda item: item[0], reverse=True)
    # Undated entries always come last
    undated = [item for item in grouped.items() if item[0] == "Undated"]
    return dated + undated


def render_html(entries: list[IndexEntry], output_path: Path, title: str) -> None:
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("index.html")

    years = []
    for year, items in _group_by_year(entries):
        years.append(
            {
                "id": f"year-{_slugify(year)}",
                "name": year,
                "articles": items,
                "count": len(items),
            }
        )

    tags = [
        {"id": f"tag-{_slugify(tag)}", "name": tag, "count": len(slugs)}
        for tag, slugs in tag_index(entries).items()
    ]

    html = template.render(
        title=title,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        years=years,
        tags=tags,
        total=len(entries),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")


def render_markdown(entries: list[IndexEntry], output_path: Path, title: str) -> None:
    lines = [f"# {title}", "", f"Total: {len(entries)}", ""]
    for year, items in _group_by_year(entries):
        lines.append(f"## {year}")
        lines.append("")
        for entry in items:
            lines.append(f"### {entry.title}")
            lines.append(f"- Slug: {entry.slug}")
            lines.append(f"- Published: {entry.published_at}")
            if entry.tags:
                lines.append(f"- Tags: {', '.join(entry.tags)}")
            if entry.reading_time:
                lines.append(f"- Reading time: {entry.reading_time} min")
            if entry.summary:
                lines.append(f"- Summary: {entry.summary}")
            lines.append("")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text("\n".join(lines), encoding="utf-8")
