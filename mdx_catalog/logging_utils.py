from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from .config import LoggingConfig


LOGGER_NAME = "mdx_catalog"

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = set(logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def setup_logging(cfg: LoggingConfig, output_dir: Path | None = None) -> logging.Logger:
    """Configure the package logger: rich console output, plus a log file in output_dir if enabled."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))
    logger.handlers = []
    logger.propagate = False

    console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if cfg.file and output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(output_dir / cfg.filename, encoding="utf-8")
        if cfg.format == "jsonl":
            file_handler.setFormatter(JsonlFormatter())
        else:
            file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, message, extra=fields)


class JsonlFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}
        )
        return json.dumps(payload, ensure_ascii=True, default=str)
