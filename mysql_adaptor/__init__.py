"""
MySQL operations for sequential state pipelines.

Usage:
    from mysql_adaptor import execute, insert, data_value

    run = execute(insert("users", {"name": data_value("name")}))
    state = await run({
        "configuration": {"host": "localhost", "port": 3306, "database": "app",
                          "user": "app", "password": "secret"},
        "data": {"name": "Ada"},
    })
    state.response["body"]   # {'affected_rows': 1, 'insert_id': 1}
"""

from mysql_adaptor.adaptor import execute, execute_sync
from mysql_adaptor.core.errors import (
    AdaptorError,
    ErrorInfo,
    ErrorKind,
    MySQLConnectionError,
    OperationError,
    QueryExecutionError,
    ResolutionError,
)
from mysql_adaptor.core.operations import (
    alter_state,
    array_to_string,
    combine,
    data_path,
    data_value,
    each,
    field,
    fields,
    last_reference_value,
    merge,
    source_value,
)
from mysql_adaptor.core.references import expand_references
from mysql_adaptor.core.state import State
from mysql_adaptor.tools.mysql import insert, sql_string, upsert

__all__ = [
    "execute",
    "execute_sync",
    "insert",
    "upsert",
    "sql_string",
    "State",
    "expand_references",
    "field",
    "fields",
    "source_value",
    "data_path",
    "data_value",
    "last_reference_value",
    "alter_state",
    "merge",
    "each",
    "combine",
    "array_to_string",
    "AdaptorError",
    "MySQLConnectionError",
    "QueryExecutionError",
    "ResolutionError",
    "OperationError",
    "ErrorInfo",
    "ErrorKind",
]
