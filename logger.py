import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

_FORMAT = logging.Formatter('[%(asctime)s] %(levelname)s %(name)s - %(message)s')
_configured = False


def _level(name: str | None) -> int:
    """Translate a level name such as ``info`` into a logging level."""
    level = getattr(logging, (name or "info").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure(level: str | None = None, log_file: str | Path | None = None) -> None:
    """Configure the root logger once.

    Falls back to ``LOG_LEVEL`` and ``LOG_FILE`` from the environment.
    """
    global _configured
    if _configured:
        return
    root = logging.getLogger()
    root.setLevel(_level(level or os.environ.get("LOG_LEVEL")))

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(_FORMAT)
    root.addHandler(stream)

    log_file = log_file or os.environ.get("LOG_FILE")
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(str(path), when='midnight', backupCount=7)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)

    # Requests are logged by server.py; keep werkzeug to warnings only.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name after configuring logging."""
    configure()
    return logging.getLogger(name)
