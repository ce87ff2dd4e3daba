"""
Single MySQL connection owned by one pipeline run.

The driver connection is wrapped in ManagedConnection, which tracks an
explicit OPEN/CLOSED status. ``close()`` is idempotent: the driver's close
is called at most once no matter how many parts of the pipeline ask for it.
"""

import asyncio
from enum import Enum
from typing import Any, Optional

import pymysql
import pymysql.cursors

from mysql_adaptor.core.errors import MySQLConnectionError, classify_mysql_error
from mysql_adaptor.core.logger import setup_logger
from .models import ConnectionConfig

logger = setup_logger(__name__)

DEFAULT_CHARSET = "utf8mb4"


class ConnectionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ManagedConnection:

    def __init__(self, raw: Any, database: Optional[str] = None, charset: str = DEFAULT_CHARSET):
        self._raw = raw
        self.database = database
        self.charset = charset
        self.status = ConnectionStatus.OPEN

    @property
    def closed(self) -> bool:
        return self.status is ConnectionStatus.CLOSED

    def cursor(self):
        if self.closed:
            raise MySQLConnectionError(f"Connection to '{self.database}' is closed")
        return self._raw.cursor()

    def close(self) -> bool:
        """
        Close the driver connection once.

        Returns True when this call closed it, False when it was already
        closed. Errors raised by the driver while closing are logged, not
        raised: the connection is considered closed either way.
        """
        if self.closed:
            logger.debug(f"Connection to '{self.database}' already closed")
            return False
        self.status = ConnectionStatus.CLOSED
        try:
            self._raw.close()
        except Exception as e:
            logger.warning(f"Error while closing connection to '{self.database}': {e}")
        return True

    def __repr__(self) -> str:
        return f"ManagedConnection(database={self.database!r}, status={self.status.value})"


def _connect_blocking(config: ConnectionConfig) -> Any:
    return pymysql.connect(
        **config.driver_kwargs(),
        autocommit=True,
        cursorclass=pymysql.cursors.DictCursor,
    )


async def open_connection(config: ConnectionConfig) -> ManagedConnection:
    """
    Open a driver connection for ``config``.

    Raises:
        MySQLConnectionError: chained to the driver error when connecting fails.
    """
    try:
        raw = await asyncio.to_thread(_connect_blocking, config)
    except Exception as e:
        error_info = classify_mysql_error(e)
        logger.error(
            f"Failed to connect to {config.host}:{config.port}/{config.database} "
            f"({error_info.code}): {error_info.message}"
        )
        raise MySQLConnectionError(
            f"Could not connect to database '{config.database}': {error_info.message}",
            error_info=error_info,
        ) from e
    return ManagedConnection(raw, database=config.database, charset=config.charset or DEFAULT_CHARSET)
