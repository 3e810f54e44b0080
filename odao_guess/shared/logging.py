import logging
import os
import re
from logging.handlers import RotatingFileHandler

EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10

REDACTED = "***"

_API_KEY_PATTERN = re.compile(r"(apikey=)[^&\s\"']+", re.IGNORECASE)


def redact_api_key(message: str) -> str:
    return _API_KEY_PATTERN.sub(rf"\g<1>{REDACTED}", message)


class _ApiKeyRedactionFilter(logging.Filter):
    """Rewrites request log lines so the Etherscan api key never reaches a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except Exception:
            return True
        if "apikey=" not in message.lower():
            return True
        record.msg = redact_api_key(message)
        record.args = ()
        return True


_api_key_filter = _ApiKeyRedactionFilter()


def redact_api_keys() -> None:
    targets = (
        "httpx",
        "httpcore",
    )
    for name in targets:
        logger = logging.getLogger(name)
        if _api_key_filter not in logger.filters:
            logger.addFilter(_api_key_filter)


def setup_events_logger(full_path, events_retention_size):
    logging.addLevelName(EVENTS_LEVEL_NUM, "EVENT")

    logger = logging.getLogger("odao_guess.event")
    logger.setLevel(EVENTS_LEVEL_NUM)

    def event(self, message, *args, **kws):
        if self.isEnabledFor(EVENTS_LEVEL_NUM):
            self._log(EVENTS_LEVEL_NUM, message, args, **kws)

    logging.Logger.event = event

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    os.makedirs(full_path, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(full_path, "events.log"),
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(EVENTS_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger
