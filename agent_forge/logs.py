"""
Logging setup for Agent Forge.

All modules log through children of the ``agent-forge`` logger. This module
configures that logger once at startup: JSON lines on stderr by default, or a
size-rotated file when file logging is enabled.
"""

import os
import sys
import json
import gzip
import time
import shutil
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime, timezone

from .config import LogConfig
from .errors import ConfigError

ROOT_LOGGER = "agent-forge"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": record.levelname.lower(),
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _gzip_namer(name: str) -> str:
    return name + ".gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as f_in, gzip.open(dest, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    os.remove(source)


class AgingRotatingFileHandler(RotatingFileHandler):
    """Size-based rotation that also drops backups older than ``max_age`` days."""

    def __init__(self, filename: str, max_bytes: int, backup_count: int,
                 max_age_days: int = 0, compress: bool = False):
        super().__init__(filename, maxBytes=max_bytes, backupCount=backup_count,
                         encoding="utf-8")
        self.max_age_days = max_age_days
        if compress:
            self.namer = _gzip_namer
            self.rotator = _gzip_rotator

    def doRollover(self):
        super().doRollover()
        if self.max_age_days > 0:
            self.prune_backups()

    def prune_backups(self, now: float = None) -> int:
        """Delete rotated files past their age. Returns how many were removed."""
        cutoff = (now or time.time()) - self.max_age_days * 86400
        base = Path(self.baseFilename)
        removed = 0
        for backup in base.parent.glob(base.name + ".*"):
            try:
                if backup.stat().st_mtime < cutoff:
                    backup.unlink()
                    removed += 1
            except FileNotFoundError:
                continue
        return removed


def parse_level(level: str) -> int:
    try:
        return LEVELS[level.strip().lower()]
    except (KeyError, AttributeError):
        raise ConfigError(f"Unknown log level: {level!r}")


def setup_logging(config: LogConfig, stream=None) -> logging.Logger:
    """
    Configure the ``agent-forge`` logger from ``config``.

    Safe to call more than once; previously installed handlers are replaced.
    """
    level = parse_level(config.level)

    if config.enabled:
        log_path = Path(config.file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Cannot create log directory {log_path.parent}: {e}")
        handler = AgingRotatingFileHandler(
            str(log_path),
            max_bytes=config.max_size * 1024 * 1024,
            backup_count=config.max_backups,
            max_age_days=config.max_age,
            compress=config.compress,
        )
    else:
        # stdout is reserved for the MCP stdio transport
        handler = logging.StreamHandler(stream or sys.stderr)

    handler.setFormatter(JSONFormatter())

    root = logging.getLogger(ROOT_LOGGER)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root
