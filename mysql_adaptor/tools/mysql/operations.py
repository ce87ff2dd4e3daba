"""
MySQL pipeline operations.

``connect``, ``disconnect`` and ``cleanup_state`` bracket a run and are
added by ``execute``. ``insert``, ``upsert`` and ``sql_string`` build
operations for pipeline authors; each executes exactly one statement and
stores the driver result as ``state.response["body"]``.
"""

from typing import Any, Callable, Mapping, Union

from mysql_adaptor.core.common import to_plain_data
from mysql_adaptor.core.errors import MySQLConnectionError
from mysql_adaptor.core.logger import setup_logger
from mysql_adaptor.core.pipeline import Operation
from mysql_adaptor.core.references import expand_references
from mysql_adaptor.core.state import State
from .connection import ManagedConnection, open_connection
from .execution import execute_statement
from .models import validate_connection_config
from .statements import insert_fragment, render, upsert_fragment

logger = setup_logger(__name__)


async def connect(state: State) -> State:
    config = validate_connection_config(state.configuration)
    connection = await open_connection(config)
    logger.info(f'Preparing to query "{config.database}"...')
    return state.evolve(connection=connection)


def disconnect(state: State) -> State:
    if state.connection is not None:
        state.connection.close()
    return state


def cleanup_state(state: State) -> State:
    return state.evolve(connection=None)


def _connection(state: State) -> ManagedConnection:
    connection = state.connection
    if connection is None:
        raise MySQLConnectionError(
            "No database connection in state; run operations through execute()"
        )
    return connection


def _resolve_values(fields: Any, state: State) -> Mapping[str, Any]:
    values = expand_references(fields, state)
    if not isinstance(values, Mapping):
        raise TypeError(f"Fields must resolve to a mapping, got {type(values).__name__}")
    return values


def insert(table: str, fields: Any) -> Operation:
    """
    Insert one row into ``table``.

    ``fields`` is a mapping of column to value, or anything that resolves
    to one against the state: callables such as ``data_value("name")`` or
    templates such as ``"{{ data.name }}"``, at any nesting level.

    Example:
        >>> execute(insert("users", {"name": data_value("name"), "age": 30}))
    """

    async def operation(state: State) -> State:
        connection = _connection(state)
        values = _resolve_values(fields, state)
        statement = render(insert_fragment(table, values), connection.charset)
        body = await execute_statement(connection, statement)
        return state.evolve(response={"body": body})

    operation.__qualname__ = f"insert({table})"
    return operation


def upsert(table: str, fields: Any) -> Operation:
    """
    Insert one row into ``table`` or update it on a duplicate key.

    Every resolved column is written on both the insert and the update side.
    """

    async def operation(state: State) -> State:
        connection = _connection(state)
        values = _resolve_values(fields, state)
        statement = render(upsert_fragment(table, values), connection.charset)
        body = await execute_statement(connection, statement)
        return state.evolve(response={"body": body})

    operation.__qualname__ = f"upsert({table})"
    return operation


def sql_string(statement: Union[str, Callable[[State], str]]) -> Operation:
    """
    Execute a literal statement produced by ``statement(state)``.

    The result is converted to plain data (dates as ISO strings, decimals
    as floats) before it is stored.

    Example:
        >>> execute(sql_string(lambda state: f"SELECT * FROM users WHERE id = {state.data['id']}"))
    """

    async def operation(state: State) -> State:
        connection = _connection(state)
        body = statement(state) if callable(statement) else statement
        if not isinstance(body, str):
            raise TypeError(f"sql_string expected a statement string, got {type(body).__name__}")
        result = await execute_statement(connection, body)
        data = to_plain_data(result)
        logger.debug(f"Result: {data}")
        return state.evolve(response={"body": data})

    operation.__qualname__ = "sql_string"
    return operation


__all__ = ["connect", "disconnect", "cleanup_state", "insert", "upsert", "sql_string"]
