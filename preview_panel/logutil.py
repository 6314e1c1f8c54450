# preview_panel/logutil.py
from __future__ import annotations

import logging
import time

ROOT_LOGGER = "preview_panel"

_STD_KEYS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created", "msecs",
    "relativeCreated", "thread", "threadName", "processName", "process", "asctime",
    "taskName", "message",
}

_configured = False


def _safe_preview(value, limit: int = 120) -> str:
    try:
        s = value if isinstance(value, str) else repr(value)
    except Exception:
        s = f"<{type(value).__name__}>"
    return s if len(s) <= limit else s[: limit - 3] + "..."


class ConsoleFormatter(logging.Formatter):
    """Readable console formatter with short timestamp + level."""
    def format(self, record: logging.LogRecord) -> str:
        ts = time.strftime("%H:%M:%S", time.localtime(record.created))
        lvl = record.levelname.ljust(5)
        msg = record.getMessage()
        # Pack extras passed via `extra=...` compactly
        extras = []
        for k, v in record.__dict__.items():
            if k in _STD_KEYS or k.startswith("_"):
                continue
            extras.append(f"{k}={_safe_preview(v)}")
        extras_s = (" " + " ".join(extras)) if extras else ""
        line = f"{ts} {lvl} [{record.name}] {msg}{extras_s}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach the console handler to the package logger once."""
    global _configured
    root = logging.getLogger(ROOT_LOGGER)
    if level is None:
        from preview_panel.config import get_config
        level = get_config().log_level
    root.setLevel(level)
    if not _configured:
        handler = logging.StreamHandler()
        handler.setFormatter(ConsoleFormatter())
        root.addHandler(handler)
        root.propagate = False
        _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger inside the package hierarchy.

    Handlers are attached by configure_logging(); until then records flow to
    whatever the host application configured.
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
