"""
Statement execution on a managed connection.

Driver calls block, so they run in a worker thread while the pipeline
awaits the result. A failing statement closes the connection before the
error is raised.
"""

import asyncio
from typing import Any

from mysql_adaptor.core.common import sql_summary
from mysql_adaptor.core.errors import QueryExecutionError, classify_mysql_error
from mysql_adaptor.core.logger import setup_logger
from .connection import ManagedConnection

logger = setup_logger(__name__)


def _execute_blocking(connection: ManagedConnection, statement: str) -> Any:
    with connection.cursor() as cursor:
        # no args: the statement is sent verbatim, '%' included
        cursor.execute(statement)
        if cursor.description is not None:
            return list(cursor.fetchall())
        return {
            "affected_rows": cursor.rowcount,
            "insert_id": cursor.lastrowid,
            "warning_count": cursor.warning_count,
        }


async def execute_statement(connection: ManagedConnection, statement: str) -> Any:
    """
    Execute one literal statement and return the driver result.

    Returns a list of row dicts for statements producing a result set,
    otherwise ``{"affected_rows": int, "insert_id": int, "warning_count": int}``.

    Raises:
        QueryExecutionError: chained to the driver error; the connection is
            closed before raising.
    """
    summary = sql_summary(statement)
    logger.info(f"Executing MySQL statement on '{connection.database}': {summary}")
    logger.debug(f"Statement: {statement}")
    try:
        result = await asyncio.to_thread(_execute_blocking, connection, statement)
    except Exception as e:
        error_info = classify_mysql_error(e)
        logger.error(f"MySQL statement failed ({summary}, {error_info.code}): {error_info.message}")
        logger.warning("That's an error. Disconnecting from database.")
        connection.close()
        raise QueryExecutionError(
            f"Statement failed ({summary}): {error_info.message}",
            statement=statement,
            error_info=error_info,
        ) from e

    if isinstance(result, list):
        logger.success(f"{summary} returned {len(result)} rows")
    else:
        logger.success(f"{summary} affected {result['affected_rows']} rows")
    return result
