"""Tests for sparky/logging_config.py"""

import json
import logging

from sparky.logging_config import JsonFormatter, setup_logging


def test_json_formatter():
    record = logging.LogRecord("sparky.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None)
    out = json.loads(JsonFormatter().format(record))
    assert out["level"] == "WARNING"
    assert out["logger"] == "sparky.test"
    assert out["message"] == "hello world"


def test_setup_logging_writes_rotating_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug", str(tmp_path / "logs"), json_logs=True)
        logging.getLogger("sparky.test").info("written to file")
        for handler in root.handlers:
            handler.flush()

        log_file = tmp_path / "logs" / "sparky.log"
        assert "written to file" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_json_formatter_uses_record_time():
    record = logging.LogRecord("sparky.test", logging.INFO, __file__, 1, "tick", None, None)
    record.created = 0.0
    out = json.loads(JsonFormatter().format(record))
    assert out["timestamp"] == "1970-01-01T00:00:00+00:00"


def test_unknown_level_falls_back_to_info(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("chatty", str(tmp_path / "logs"))
        assert root.level == logging.INFO
        assert len(root.handlers) == 2
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
