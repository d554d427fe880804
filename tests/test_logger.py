import logging
from logging.handlers import TimedRotatingFileHandler

import logger


def isolate_logging(monkeypatch):
    root = logging.getLogger()
    werkzeug_log = logging.getLogger("werkzeug")
    monkeypatch.setattr(logger, "_configured", False)
    return root, werkzeug_log, (root.handlers[:], root.level, werkzeug_log.level)


def restore_logging(root, werkzeug_log, saved):
    handlers, level, werkzeug_level = saved
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    werkzeug_log.setLevel(werkzeug_level)


def test_log_file_handler(tmp_path, monkeypatch):
    root, werkzeug_log, saved = isolate_logging(monkeypatch)
    log_path = tmp_path / "logs" / "signer.log"
    try:
        logger.configure("debug", log_path)
        assert root.level == logging.DEBUG
        file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == 7

        logger.get_logger("key_store").info("Private key cache invalidated")
        file_handlers[0].flush()
        assert "INFO key_store - Private key cache invalidated" in log_path.read_text()
    finally:
        restore_logging(root, werkzeug_log, saved)


def test_configure_runs_once(tmp_path, monkeypatch):
    root, werkzeug_log, saved = isolate_logging(monkeypatch)
    try:
        logger.configure("info")
        count = len(root.handlers)
        logger.configure("debug", tmp_path / "signer.log")
        assert len(root.handlers) == count
        assert root.level == logging.INFO
        assert not (tmp_path / "signer.log").exists()
    finally:
        restore_logging(root, werkzeug_log, saved)


def test_werkzeug_access_log_silenced(monkeypatch):
    root, werkzeug_log, saved = isolate_logging(monkeypatch)
    try:
        logger.configure("debug")
        assert werkzeug_log.level == logging.WARNING
        assert not werkzeug_log.isEnabledFor(logging.INFO)
    finally:
        restore_logging(root, werkzeug_log, saved)


def test_unknown_level_falls_back_to_info():
    assert logger._level("loud") == logging.INFO
    assert logger._level(None) == logging.INFO
    assert logger._level("warning") == logging.WARNING
