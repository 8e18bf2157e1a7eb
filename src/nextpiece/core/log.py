from __future__ import annotations

import logging
import os
import sys
import json
from typing import Optional

from dotenv import load_dotenv

_configured = False


class JsonHandler(logging.StreamHandler):
    """Lightweight JSON logger for stdout."""
    def __init__(self, stream=None):
        super().__init__(stream=stream or sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = record.msg if isinstance(record.msg, dict) else record.getMessage()
            obj = {
                "ts": record.created,
                "lvl": record.levelname,
                "name": record.name,
                "msg": msg,
            }
            for k in ("filename", "lineno", "funcName"):
                obj[k] = getattr(record, k, None)
            self.stream.write(json.dumps(obj, ensure_ascii=False, default=str) + "\n")
            self.flush()
        except Exception:  # pragma: no cover
            self.handleError(record)


def setup(level: Optional[str] = None, json_mode: Optional[bool] = None, *, force: bool = False) -> None:
    """Configure root logger.
    - Reads LOG_LEVEL, LOG_JSON from env (and .env) if args are None
    - If already configured, do nothing unless force=True
    """
    global _configured
    if _configured and not force:
        return

    load_dotenv()

    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    py_level = getattr(logging, lvl, None)
    if not isinstance(py_level, int):
        py_level = logging.INFO

    json_flag = json_mode if json_mode is not None else (os.getenv("LOG_JSON", "0") == "1")

    root = logging.getLogger()
    # Reset handlers to avoid duplicate logs (pytest re-runs etc.)
    root.handlers.clear()
    root.setLevel(py_level)

    if json_flag:
        handler: logging.Handler = JsonHandler()
    else:
        fmt = "[%(asctime)s] %(levelname)s %(name)s | %(message)s"
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=fmt))
    root.addHandler(handler)

    _configured = True


def get(name: str) -> logging.Logger:
    """Helper to get a namespaced logger."""
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Dynamically adjust root log level (e.g., during tests)."""
    py_level = getattr(logging, level.upper(), None)
    logging.getLogger().setLevel(py_level if isinstance(py_level, int) else logging.INFO)
