"""Tests for YAML configuration loading."""

from pathlib import Path

import pytest

from mdx_catalog.config import AppConfig, load_config, normalize_extensions


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.content.extensions == [".mdx", ".md"]
    assert cfg.lint.title_similarity_threshold == 92


def test_load_config_merges_sections(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "content:\n"
        "  directory: posts\n"
        "lint:\n"
        "  require_code_language: false\n"
        "index:\n"
        "  formats: [json, markdown]\n"
        "unrelated:\n"
        "  ignored: true\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.content.directory == "posts"
    assert cfg.content.extensions == [".mdx", ".md"]
    assert cfg.lint.require_code_language is False
    assert cfg.lint.check_future_dates is True
    assert cfg.index.formats == ["json", "markdown"]


def test_defaults_are_not_shared_between_loads(tmp_path: Path):
    cfg = load_config(None)
    cfg.index.formats.append("markdown")

    assert load_config(None).index.formats == ["json", "html"]


def test_unknown_key_in_section_raises(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("lint:\n  no_such_option: 1\n", encoding="utf-8")

    with pytest.raises(TypeError):
        load_config(str(path))


def test_non_mapping_config_raises(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_config(str(path))


def test_normalize_extensions():
    assert normalize_extensions(["MDX", ".Md", " ", "markdown"]) == [".mdx", ".md", ".markdown"]


def test_unknown_index_format_raises(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("index:\n  formats: [json, pdf]\n", encoding="utf-8")

    with pytest.raises(ValueError, match="pdf"):
        load_config(str(path))


def test_index_formats_are_lowercased(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("index:\n  formats: HTML\n", encoding="utf-8")

    assert load_config(str(path)).index.formats == ["html"]
