from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Final, Optional, TextIO

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}

TEXT_LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME: Final[str] = "tile_system"


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Log calls in this package use a snake_case event name as the message and
    pass details through ``extra=``; those land under ``"fields"``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        fields: dict[str, Any] = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        }
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            fields["stack"] = self.formatStack(record.stack_info)

        payload = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            "fields": fields,
        }
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    *,
    log_level: Optional[str] = None,
    log_format: str = "json",
    stream: Optional[TextIO] = None,
) -> None:
    """Install a single handler on the root logger.

    Logs go to stderr by default so stdout stays reserved for command output.
    Calling again replaces the previous handler.
    """
    level = (log_level or "INFO").upper()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(HANDLER_NAME)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
