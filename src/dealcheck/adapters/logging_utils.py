import logging
import json
import sys
import time
from .config import config

_ROOT = "dealcheck"

# where new handlers write; the CLI moves it to stderr so stdout stays clean
_stream = sys.stdout


class JsonLogFormatter(logging.Formatter):
    """
    One JSON object per line. Structured fields go in through
    ``logger.info("...", extra={"context": {...}})``.
    """

    def format(self, record):
        payload = {
            "ts": time.time(),
            "env": config.ENV,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        # numpy scalars / floats like inf end up here
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(_stream)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL.upper())
        logger.propagate = False
    return logger


def set_log_level(level: str) -> None:
    """
    Re-level every logger already handed out under the package (CLI --log-level).
    """
    level = level.upper()
    for logger in _package_loggers():
        logger.setLevel(level)


def _package_loggers():
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(logger, logging.Logger) and (name == _ROOT or name.startswith(_ROOT + ".")):
            yield logger


def set_log_stream(stream) -> None:
    """
    Point every package log handler, current and future, at `stream`.
    """
    global _stream
    _stream = stream
    for logger in _package_loggers():
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(stream)
