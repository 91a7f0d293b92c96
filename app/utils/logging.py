# app/utils/logging.py
import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter

from app.utils.settings import LOG_JSON, LOG_LEVEL

REQUEST_ID_CTX: ContextVar[str] = ContextVar("request_id", default="-")

_PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"
_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"

_configured = False


class RequestIdFilter(logging.Filter):
    """Stamps every record with the id of the request being served ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


def _configure() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    if LOG_JSON:
        handler.setFormatter(JsonFormatter(_JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger("app")
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL.upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure()
    return logging.getLogger(name)
