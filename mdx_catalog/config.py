"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ContentConfig: where articles live and which files count as articles
- LintConfig: which checks run and their thresholds
- IndexConfig: site index and listing output settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml


REQUIRED_FIELDS = ["title", "publishedAt", "summary", "tags"]


class OutputFormat(str, Enum):
    JSON = "json"
    HTML = "html"
    MARKDOWN = "markdown"


@dataclass
class ContentConfig:
    """Configuration for locating content files.

    Attributes:
        directory: Root directory holding the article files
        extensions: File suffixes treated as articles
    """

    directory: str = "content"
    extensions: list[str] = field(default_factory=lambda: [".mdx", ".md"])


@dataclass
class LintConfig:
    """Configuration for content linting.

    Attributes:
        required_fields: Frontmatter keys every article must define
        known_fields: Keys accepted without an unknown-field warning
        check_future_dates: Warn when publishedAt is after today
        require_code_language: Warn on fenced code blocks without a language hint
        warn_unknown_fields: Warn on frontmatter keys outside known_fields
        max_summary_chars: Summary length above which a warning is raised
        title_similarity_threshold: Fuzzy match threshold (0-100) for similar titles
    """

    required_fields: list[str] = field(default_factory=lambda: list(REQUIRED_FIELDS))
    known_fields: list[str] = field(default_factory=lambda: list(REQUIRED_FIELDS))
    check_future_dates: bool = True
    require_code_language: bool = True
    warn_unknown_fields: bool = True
    max_summary_chars: int = 300
    title_similarity_threshold: int = 92


@dataclass
class IndexConfig:
    """Configuration for index generation.

    Attributes:
        formats: Outputs to write ("json", "html", "markdown"); JSON is always written
        title: Title of the rendered listing page
        words_per_minute: Reading speed used for reading time estimates
        filename: Base name of the generated index files
    """

    formats: list[str] = field(default_factory=lambda: ["json", "html"])
    title: str = "Articles"
    words_per_minute: int = 200
    filename: str = "index"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file written to the output directory
    """

    level: str = "WARNING"
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    content: ContentConfig = field(default_factory=ContentConfig)
    lint: LintConfig = field(default_factory=LintConfig)
    index: IndexConfig = field(default_factory=IndexConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "content": {
            "directory": cfg.content.directory,
            "extensions": list(cfg.content.extensions),
        },
        "lint": {
            "required_fields": list(cfg.lint.required_fields),
            "known_fields": list(cfg.lint.known_fields),
            "check_future_dates": cfg.lint.check_future_dates,
            "require_code_language": cfg.lint.require_code_language,
            "warn_unknown_fields": cfg.lint.warn_unknown_fields,
            "max_summary_chars": cfg.lint.max_summary_chars,
            "title_similarity_threshold": cfg.lint.title_similarity_threshold,
        },
        "index": {
            "formats": list(cfg.index.formats),
            "title": cfg.index.title,
            "words_per_minute": cfg.index.words_per_minute,
            "filename": cfg.index.filename,
        },
        "logging": {
            "level": cfg.logging.level,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    data["index"]["formats"] = _check_formats(data["index"].get("formats", []))
    return AppConfig(
        content=ContentConfig(**data["content"]),
        lint=LintConfig(**data["lint"]),
        index=IndexConfig(**data["index"]),
        logging=LoggingConfig(**data["logging"]),
    )


def _check_formats(formats: list[str]) -> list[str]:
    if isinstance(formats, str):
        formats = [formats]
    allowed = {fmt.value for fmt in OutputFormat}
    checked = [str(fmt).lower() for fmt in formats]
    unknown = [fmt for fmt in checked if fmt not in allowed]
    if unknown:
        raise ValueError(f"Unknown index format(s): {', '.join(unknown)}")
    return checked


def normalize_extensions(extensions: list[str]) -> list[str]:
    """Lowercase suffixes and make sure each starts with a dot."""
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.append(ext if ext.startswith(".") else f".{ext}")
    return normalized
