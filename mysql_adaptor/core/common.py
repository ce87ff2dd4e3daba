import base64
import json
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any


class DateTimeEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        elif isinstance(obj, timedelta):
            return obj.total_seconds()
        elif isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, (bytes, bytearray)):
            try:
                return obj.decode("utf-8")
            except UnicodeDecodeError:
                # binary columns: keep the bytes recoverable
                return base64.b64encode(obj).decode("ascii")
        elif isinstance(obj, (set, frozenset)):
            return sorted(obj, key=str)
        return super().default(obj)


def to_plain_data(value: Any) -> Any:
    """
    Round-trip a value through JSON.

    The result shares no object identity with the input and contains only
    dicts, lists, strings, numbers, booleans and None.
    """
    return json.loads(json.dumps(value, cls=DateTimeEncoder))


def sql_summary(statement: str) -> str:
    trimmed = (statement or "").strip()
    if not trimmed:
        return "UNKNOWN len=0"
    operation = trimmed.split(None, 1)[0].upper()
    return f"{operation} len={len(trimmed)}"
