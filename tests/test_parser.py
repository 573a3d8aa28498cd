"""Tests for frontmatter parsing and content discovery."""

import logging
from pathlib import Path

import pytest

from mdx_catalog import parser
from mdx_catalog.parser import (
    FrontmatterError,
    iter_content_files,
    load_article,
    load_articles,
    parse_article,
    parse_frontmatter,
    split_frontmatter,
)


SAMPLE = """---
title: Building Portlets with Vue
publishedAt: 2023-04-12
summary: How we ship Vue apps inside Liferay DXP.
tags: vue, liferay, portlets
---
## Why Vue

Body text.
"""


def test_split_frontmatter_returns_block_body_and_body_line():
    raw, body, body_line = split_frontmatter(SAMPLE)

    assert raw.startswith("title: Building Portlets with Vue")
    assert body.startswith("## Why Vue")
    assert body_line == 7


def test_parse_article_keeps_fields_as_text():
    article = parse_article(SAMPLE, slug="vue-portlets")

    assert article.slug == "vue-portlets"
    assert article.title == "Building Portlets with Vue"
    assert article.published_at == "2023-04-12"
    assert article.tags == "vue, liferay, portlets"
    assert article.tag_list == ["vue", "liferay", "portlets"]
    assert article.fields == ["title", "publishedAt", "summary", "tags"]
    assert article.extra == {}


def test_parse_article_joins_yaml_tag_lists_and_keeps_unknown_keys():
    text = "---\ntitle: T\npublishedAt: '2023-01-02'\nsummary: S\ntags: [vue, java]\ndraft: true\n---\nBody\n"

    article = parse_article(text, slug="t")

    assert article.tags == "vue, java"
    assert article.extra == {"draft": "true"}


def test_parse_article_leaves_missing_fields_empty():
    article = parse_article("---\ntitle: Only a title\n---\nBody\n", slug="partial")

    assert article.summary == ""
    assert article.tags == ""
    assert "summary" not in article.fields


def test_impossible_dates_stay_text_for_the_linter():
    meta = parse_frontmatter("publishedAt: 2023-13-01\n")

    assert meta == {"publishedAt": "2023-13-01"}


def test_parse_frontmatter_normalizes_datetimes_and_none():
    meta = parse_frontmatter("publishedAt: 2023-04-12T10:30:00\nsummary:\n")

    assert meta["publishedAt"] == "2023-04-12T10:30:00"
    assert meta["summary"] == ""


def test_split_frontmatter_ignores_bom():
    raw, body, _ = split_frontmatter("\ufeff---\ntitle: x\n---\nBody")

    assert raw == "title: x\n"
    assert body == "Body"


def test_missing_opening_delimiter_raises():
    with pytest.raises(FrontmatterError) as excinfo:
        split_frontmatter("# Just markdown\n")

    assert excinfo.value.line == 1


def test_unclosed_block_raises():
    with pytest.raises(FrontmatterError, match="never closed"):
        split_frontmatter("---\ntitle: x\nBody without closing delimiter\n")


def test_invalid_yaml_reports_file_line():
    with pytest.raises(FrontmatterError) as excinfo:
        parse_article("---\ntitle: ok\nsummary: [unclosed\n---\nBody\n", slug="bad")

    assert excinfo.value.line is not None
    assert excinfo.value.line >= 2


def test_non_mapping_frontmatter_raises():
    with pytest.raises(FrontmatterError, match="key: value"):
        parse_frontmatter("- one\n- two\n")


def test_nested_mapping_value_raises():
    with pytest.raises(FrontmatterError, match="plain text"):
        parse_frontmatter("title:\n  en: Hello\n")


def test_load_article_uses_file_stem_as_slug(tmp_path: Path):
    path = tmp_path / "vue-portlets.mdx"
    path.write_text(SAMPLE, encoding="utf-8")

    article = load_article(path)

    assert article.slug == "vue-portlets"
    assert article.path == path


def test_iter_content_files_filters_and_skips_hidden(tmp_path: Path):
    (tmp_path / "b.mdx").write_text(SAMPLE, encoding="utf-8")
    (tmp_path / "a.md").write_text(SAMPLE, encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    (tmp_path / ".drafts").mkdir()
    (tmp_path / ".drafts" / "draft.mdx").write_text(SAMPLE, encoding="utf-8")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "c.MDX").write_text(SAMPLE, encoding="utf-8")

    names = [path.name for path in iter_content_files(tmp_path, [".mdx", ".md"])]

    assert names == ["a.md", "b.mdx", "c.MDX"]


def test_iter_content_files_missing_directory(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        list(iter_content_files(tmp_path / "missing", [".mdx"]))


def test_load_articles_collects_failures(tmp_path: Path):
    (tmp_path / "good.mdx").write_text(SAMPLE, encoding="utf-8")
    (tmp_path / "broken.mdx").write_text("no frontmatter here\n", encoding="utf-8")
    seen = []

    articles, failures = load_articles(tmp_path, [".mdx"], on_loaded=seen.append)

    assert [article.slug for article in articles] == ["good"]
    assert len(failures) == 1
    path, exc = failures[0]
    assert path.name == "broken.mdx"
    assert exc.path == path
    assert len(seen) == 2


def test_load_articles_records_undecodable_files(tmp_path: Path):
    (tmp_path / "good.mdx").write_text(SAMPLE, encoding="utf-8")
    (tmp_path / "latin1.mdx").write_bytes("---\ntitle: Caf\xe9\n---\nBody\n".encode("latin-1"))

    articles, failures = load_articles(tmp_path, [".mdx"])

    assert [article.slug for article in articles] == ["good"]
    assert failures[0][0].name == "latin1.mdx"
    assert "UTF-8" in failures[0][1].message


def test_load_articles_survives_unreadable_file(tmp_path: Path, monkeypatch, caplog):
    (tmp_path / "good.mdx").write_text(SAMPLE, encoding="utf-8")
    (tmp_path / "locked.mdx").write_text(SAMPLE, encoding="utf-8")
    real_load = parser.load_article

    def fake_load(path: Path):
        if path.name == "locked.mdx":
            raise PermissionError(13, "Permission denied")
        return real_load(path)

    monkeypatch.setattr(parser, "load_article", fake_load)
    monkeypatch.setattr(logging.getLogger("mdx_catalog"), "propagate", True)

    with caplog.at_level(logging.WARNING, logger="mdx_catalog"):
        articles, failures = load_articles(tmp_path, [".mdx"])

    assert [article.slug for article in articles] == ["good"]
    assert failures[0][1].message == "file could not be read: Permission denied"
    assert "locked.mdx" in caplog.text
