"""
Process-wide logging: one JSON object per line on stdout, bunyan style.
"""
import json
import logging
import socket
import sys
from datetime import datetime, timezone

# Python level -> bunyan numeric level
BUNYAN_LEVELS = {
    logging.DEBUG: 20,
    logging.INFO: 30,
    logging.WARNING: 40,
    logging.ERROR: 50,
    logging.CRITICAL: 60,
}

# Attributes every LogRecord carries, plus uvicorn's ANSI copy of the message;
# anything else came in through extra=
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName", "color_message"}

_handler = None


class JsonFormatter(logging.Formatter):
    def __init__(self, app_name):
        super().__init__()
        self.app_name = app_name
        self.hostname = socket.gethostname()

    def format(self, record):
        payload = {
            "v": 0,
            "name": self.app_name,
            "msg": record.getMessage(),
            "level": BUNYAN_LEVELS.get(record.levelno, 30),
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "hostname": self.hostname,
            "pid": record.process,
            "target": record.name,
            "line": record.lineno,
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def resolve_level(name):
    """Map a level name to a logging level, falling back to INFO"""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level="info", app_name="ws-echo-server", force=False):
    """Install the JSON handler on the root logger once per process"""
    global _handler

    root = logging.getLogger()
    if _handler is not None:
        if not force:
            return _handler
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(JsonFormatter(app_name))
    root.addHandler(_handler)
    root.setLevel(resolve_level(level))
    return _handler
