"""Structured JSON-lines logging shared by the API and CLI jobs"""
import json
import logging
import sys
import time
from typing import Union

# Record attributes promoted into the JSON line when a caller passes them via `extra`
CONTEXT_FIELDS = ("trace_id", "mode", "stage", "status", "latency_ms", "chars", "error_type")


class JsonFormatter(logging.Formatter):
    """JSON line formatter carrying pipeline context fields"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_json_logging(level: Union[int, str] = logging.INFO) -> None:
    """Route all loggers through a single stdout JSON handler"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    # Keep per-request noise from the HTTP client out of the service log
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info("JSON logging initialized", extra={"trace_id": "system_init"})
