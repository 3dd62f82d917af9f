"""Logging configuration helpers."""

import logging

LOGGER_NAME = "creation_studio"
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if not extras:
            return message
        fields = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{message} [{fields}]"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ExtraFieldsFormatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
