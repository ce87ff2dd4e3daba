from datetime import datetime
import re
import sys
import json
import logging
import traceback

from mysql_adaptor.core.config import get_settings


SUCCESS_LEVEL = 25
LOG_SEVERITY = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "SUCCESS": "SUCCESS",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
    "CRITICAL": "CRITICAL"
}

_RESERVED_ATTRS = [
    "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "process", "processName", "scope", "name", "taskName"
]

logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


class CustomLogger(logging.Logger):
    def success(self, message, *args, **kwargs):
        if self.isEnabledFor(SUCCESS_LEVEL):
            self.log(SUCCESS_LEVEL, message, *args, **kwargs, stacklevel=2)


def stringify_extra(value):
    if isinstance(value, (list, dict)):
        return str(value)
    else:
        return value


class CustomFormatter(logging.Formatter):

    def __init__(self, fmt="%(message)s", include_location=False):
        super().__init__(fmt)
        self.include_location = include_location

    def format(self, record):
        level_name = LOG_SEVERITY.get(record.levelname, record.levelname)
        scope = getattr(record, "scope", "")
        location = ""
        if self.include_location:
            location = f"{record.pathname}:{record.lineno}\n({record.module}:{record.funcName}:{record.lineno})"

        metadata_line = f"{datetime.now().isoformat()} [{level_name}] {scope} {location}".strip()

        message = record.getMessage()
        message_split = message.splitlines()
        if len(message_split) > 1:
            message_line = f"     Message: {message_split[0]}"
            for line in message_split[1:]:
                message_line += f"\n             {line}"
        else:
            message_line = f"     Message: {message}"

        extra_items = [
            f"{key}: {stringify_extra(value)}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        ]
        extra_info = ""
        if extra_items:
            extra_info = f"\n     {' '.join(extra_items)}"
        formatted_log = f"{metadata_line}\n{message_line}{extra_info}"
        if record.exc_info:
            # clickable "file:line" frames in editors
            frames = traceback.format_exception(*record.exc_info)
            frames = [re.sub(r'File "([^"]+)", line (\d+),', r'File "\1:\2"', frame) for frame in frames]
            formatted_log += "\n" + "".join(frames)
        return formatted_log


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_dict = {
            "level": record.levelname,
            "message": record.getMessage(),
            "time": self.formatTime(record, self.datefmt),
            "logger": record.name,
        }
        if hasattr(record, "scope"):
            log_dict["scope"] = record.scope
        log_dict["location"] = {
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_dict, ensure_ascii=False, default=str)


def setup_logger(name: str, include_location=None, use_json=None):
    """
    Build a stdout logger for a module.

    Arguments left as None fall back to Settings, so MYSQL_ADAPTOR_LOG_JSON and
    MYSQL_ADAPTOR_LOG_LOCATION switch every module logger at once.
    """
    settings = get_settings()
    if include_location is None:
        include_location = settings.log_location
    if use_json is None:
        use_json = settings.log_json

    logging.setLoggerClass(CustomLogger)
    logger = logging.getLogger(name)

    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setLevel(logging.DEBUG)
        if use_json:
            stream_handler.setFormatter(JSONFormatter())
        else:
            stream_handler.setFormatter(CustomFormatter(include_location=include_location))
        logger.addHandler(stream_handler)
    logger.setLevel(settings.log_level)
    logger.propagate = False
    return logger
