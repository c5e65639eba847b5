import logging
import re
import sys
from typing import Iterable, Optional


_CONFIGURED = False

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Third-party loggers that log every request URL (query string included) at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")

_SECRET_PARAMS = ("token",)


class RedactSecretsFilter(logging.Filter):
    """Masks provider credentials that appear as query parameters in a log message."""

    def __init__(self, params: Iterable[str] = _SECRET_PARAMS):
        super().__init__()
        names = "|".join(re.escape(p) for p in params)
        self._pattern = re.compile(rf"(\b(?:{names})=)[^&\s'\"]+")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._pattern.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Route all logging to stdout with one line per record.
    Only the first call in a process takes effect.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.addFilter(RedactSecretsFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _CONFIGURED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)
