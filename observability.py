"""
Logging setup

JSON lines for production log shippers, a plain one-line format for
local development. Called once from the application lifespan.
"""

import json
import logging
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):

    EXTRA_FIELDS = ("error_code", "path", "method", "status_code", "duration_ms", "collection")

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in self.EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "text"):
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    # lifespan can run more than once per process (tests, reloads)
    for existing in list(root.handlers):
        if getattr(existing, "_storefront_handler", False):
            root.removeHandler(existing)
    handler._storefront_handler = True
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
