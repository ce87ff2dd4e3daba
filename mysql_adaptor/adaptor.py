"""
Pipeline entry points.

``execute`` wraps user operations with the connection lifecycle:

    [connect, *operations, disconnect, cleanup_state]

Example:
    run = execute(
        insert("users", {"name": "{{ data.name }}"}),
        sql_string(lambda state: "SELECT COUNT(*) AS n FROM users"),
    )
    final_state = await run({"configuration": {...}, "data": {"name": "Ada"}})
    final_state.response["body"]   # [{'n': 1}]
"""

import asyncio
from typing import Any, Awaitable, Callable

from mysql_adaptor.core.logger import setup_logger
from mysql_adaptor.core.pipeline import Operation, execute_operations
from mysql_adaptor.core.state import State
from mysql_adaptor.tools.mysql.connection import ManagedConnection
from mysql_adaptor.tools.mysql.operations import cleanup_state, connect, disconnect

logger = setup_logger(__name__)


def _initial_state(state: Any) -> State:
    if state is None:
        return State()
    if isinstance(state, State):
        # each run owns its state; copy the references list it will extend
        return state.evolve(references=list(state.references))
    initial = {"references": [], "data": None}
    initial.update(state)
    return State.coerce(initial)


def _close_quietly(connection: ManagedConnection) -> None:
    try:
        connection.close()
    except Exception as e:
        logger.error(f"Failed to close connection after pipeline error: {e}")


def execute(*operations: Operation) -> Callable[[Any], Awaitable[State]]:
    """
    Build an operation running ``operations`` on a fresh connection.

    On success the returned state has ``connection`` cleared. If any
    operation raises or the run is cancelled, every connection this run
    opened is closed (a no-op for one already closed by a failed query)
    and the original error is re-raised.
    """
    async def run(state: Any = None) -> State:
        opened: list[ManagedConnection] = []

        async def tracked_connect(current: State) -> State:
            next_state = await connect(current)
            opened.append(next_state.connection)
            return next_state

        tracked_connect.__qualname__ = "connect"
        pipeline = execute_operations(tracked_connect, *operations, disconnect, cleanup_state)
        try:
            return await pipeline(_initial_state(state))
        except BaseException as e:
            # cancellation included: the connection must not outlive the run
            logger.error(f"Pipeline failed: {type(e).__name__}: {e}")
            for connection in opened:
                _close_quietly(connection)
            raise

    return run


def execute_sync(*operations: Operation) -> Callable[[Any], State]:
    """
    Blocking variant of ``execute`` for callers outside an event loop.

    Uses asyncio.run(), so it must not be called from a running loop.
    """
    run = execute(*operations)

    def run_sync(state: Any = None) -> State:
        return asyncio.run(run(state))

    return run_sync


__all__ = ["execute", "execute_sync"]
