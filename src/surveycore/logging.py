from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Context variable to attach survey_id to every log record.
_SURVEY_ID: ContextVar[Optional[str]] = ContextVar("survey_id", default=None)

_RESERVED = {
    "msg", "args", "levelname", "levelno", "name", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "processName", "process",
    "taskName", "survey_id",
}


def set_survey_id(survey_id: str) -> None:
    # Set survey_id in context for the current evaluation flow.
    _SURVEY_ID.set(survey_id)


def clear_survey_id() -> None:
    _SURVEY_ID.set(None)


class SurveyIdFilter(logging.Filter):
    # Adds survey_id to log records.
    def filter(self, record: logging.LogRecord) -> bool:
        record.survey_id = _SURVEY_ID.get()
        return True


class JsonFormatter(logging.Formatter):
    # Structured JSON formatter for logs.
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).replace(microsecond=0).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "survey_id": getattr(record, "survey_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # Extras passed through extra={}
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            try:
                json.dumps(value, ensure_ascii=False)
                payload[key] = value
            except TypeError:
                payload[key] = str(value)

        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_logs: bool = False) -> None:
    # Configure root logging once. Called by the embedding application, never on import.
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(SurveyIdFilter())

    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s survey_id=%(survey_id)s %(message)s"
        ))

    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
