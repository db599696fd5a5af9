from __future__ import annotations

import logging
import os

from pythonjsonlogger import jsonlogger

from app.config import settings
from app.middleware import request_id_var

_QUIET_LOGGERS = {
    "httpx": "HTTPX_LOG_LEVEL",
    "uvicorn.access": "UVICORN_ACCESS_LOG_LEVEL",
    "azure": "AZURE_LOG_LEVEL",
}


class ServiceContextFilter(logging.Filter):
    """Stamps service identity and the current request id onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = settings.SERVICE_NAME
        record.version = settings.SERVICE_VERSION
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def configure_logging() -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # configure_logging() runs once per create_app(); keep a single handler
    if any(getattr(h, "_palette_json", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler._palette_json = True
    handler.addFilter(ServiceContextFilter())
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(service)s %(request_id)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "ts"},
        )
    )
    root.addHandler(handler)

    for name, env_var in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(os.getenv(env_var, "WARNING"))
