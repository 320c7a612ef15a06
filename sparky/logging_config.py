"""
Logging setup for the sparky REPL.

Console output goes to stderr so it never interleaves with chat replies on
stdout. The log file under logs_dir rotates at 10 MB with 5 backups.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_FILE = "sparky.log"
_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5
_QUIET_LOGGERS = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, stamped with the record's own creation time."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _console_handler(level: int, json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter = JsonFormatter() if json_logs else logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S")
    handler.setFormatter(formatter)
    return handler


def _file_handler(level: int, logs_dir: str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        os.path.join(logs_dir, _LOG_FILE),
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(log_level: str, logs_dir: str, json_logs: bool = False) -> None:
    """Replace the root logger's handlers with the console and rotating file handlers."""
    os.makedirs(logs_dir, exist_ok=True)
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        handlers=[_console_handler(level, json_logs), _file_handler(level, logs_dir)],
        force=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
