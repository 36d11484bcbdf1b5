import datetime
import json
import logging
import os
import sys
from datetime import timezone
from logging.handlers import TimedRotatingFileHandler


# ---------- JSON logger to stdout ----------
class JsonFormatter(logging.Formatter):
    def format(self, record):
        ts = datetime.datetime.now(timezone.utc).isoformat()
        base = {
            "timestamp": ts,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
            "process": record.process,
            "thread": record.thread,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            base.update(extra)
        return json.dumps(base, default=str, ensure_ascii=False)


ROOT_LOGGER = "wikicontent"


def configure_logging(level=None, log_dir=None):
    """
    Attach the JSON handlers to the package logger, once per process.

    Module loggers are children of it and propagate their records here. When
    log_dir is given a midnight-rotated wikicontent.log is written as well
    (7 days kept). The level defaults to LOG_LEVEL from the environment.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_dir = log_dir or os.getenv("LOG_DIR")

    # --- StreamHandler (stdout) ---
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(JsonFormatter())
    root.addHandler(stream_handler)

    # --- FileHandler (optional) ---
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            os.path.join(log_dir, f"{ROOT_LOGGER}.log"),
            when="midnight",
            interval=1,
            backupCount=7,
        )
        file_handler.setFormatter(JsonFormatter())
        root.addHandler(file_handler)

    root.setLevel(level)
    root.propagate = False
    return root


def get_logger(name=ROOT_LOGGER):
    configure_logging()
    # scripts run with -m log as __main__; keep them under the package logger
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
