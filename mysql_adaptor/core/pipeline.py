"""
Sequential operation pipeline.

An operation is any callable taking a State and returning either the next
State or an awaitable resolving to it. Operations run strictly one after
another; each receives exactly the state produced by its predecessor.
The first failure stops the pipeline and propagates unchanged.

Usage:
    run = execute_operations(alter_state(prepare), insert("users", fields))
    final_state = await run({"configuration": {...}})
"""

import inspect
from typing import Any, Awaitable, Callable, Union

from mysql_adaptor.core.errors import OperationError
from mysql_adaptor.core.logger import setup_logger
from mysql_adaptor.core.state import State

logger = setup_logger(__name__)

Operation = Callable[[State], Union[State, Awaitable[State]]]


def operation_name(operation: Operation) -> str:
    return getattr(operation, "__qualname__", None) or type(operation).__name__


async def run_operation(operation: Operation, state: State) -> State:
    """Run one operation, awaiting its result when it is pending."""
    result = operation(state)
    if inspect.isawaitable(result):
        result = await result
    if isinstance(result, State):
        return result
    if isinstance(result, dict):
        return State.coerce(result)
    raise OperationError(
        f"Operation '{operation_name(operation)}' returned {type(result).__name__}, expected a State"
    )


def execute_operations(*operations: Operation) -> Callable[[Any], Awaitable[State]]:
    """
    Compose operations left to right into a single pending operation.

    Zero operations is the identity. Later operations never run once an
    earlier one has raised.
    """

    async def run(state: Any) -> State:
        current = State.coerce(state)
        total = len(operations)
        for index, operation in enumerate(operations, start=1):
            logger.debug(f"[PIPELINE] Operation {index}/{total} '{operation_name(operation)}'")
            try:
                current = await run_operation(operation, current)
            except Exception as e:
                logger.debug(
                    f"[PIPELINE] Operation {index}/{total} '{operation_name(operation)}' failed: {e}"
                )
                raise
        return current

    return run


__all__ = ["Operation", "execute_operations", "run_operation", "operation_name"]
