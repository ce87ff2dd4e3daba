"""
Helper operations for composing pipelines.

Value helpers (``source_value``, ``data_value``, ``last_reference_value``)
return functions of the state and are meant to be placed inside field specs,
where ``expand_references`` calls them. Operation helpers (``alter_state``,
``each``, ``combine``) return operations for the pipeline itself.
"""

from collections.abc import Iterable
from typing import Any, Callable

from mysql_adaptor.core.logger import setup_logger
from mysql_adaptor.core.pipeline import Operation, execute_operations, run_operation
from mysql_adaptor.core.references import expand_references, resolve_path
from mysql_adaptor.core.state import State

logger = setup_logger(__name__)


def field(key: str, value: Any) -> tuple[str, Any]:
    return key, value


def fields(*pairs: tuple[str, Any]) -> dict[str, Any]:
    return dict(pairs)


def source_value(path: str) -> Callable[[Any], Any]:
    """Return a function picking the value at ``path`` out of the state."""

    def pick(state: Any) -> Any:
        return resolve_path(state, path)

    return pick


def data_path(path: str) -> str:
    path = path.strip()
    if path.startswith("$.data"):
        return path
    if path.startswith("$."):
        path = path[2:]
    separator = "" if path.startswith("[") else "."
    return f"$.data{separator}{path}"


def data_value(path: str) -> Callable[[Any], Any]:
    return source_value(data_path(path))


def last_reference_value(path: str) -> Callable[[State], Any]:
    """Pick ``path`` out of the newest reference, or None without references."""

    def pick(state: State) -> Any:
        if not state.references:
            return None
        return resolve_path(state.references[-1], path)

    return pick


def alter_state(func: Callable[[State], Any]) -> Operation:
    """Wrap a plain function of the state as an operation."""

    async def operation(state: State) -> State:
        return await run_operation(func, state)

    operation.__qualname__ = f"alter_state({getattr(func, '__qualname__', 'func')})"
    return operation


def merge(path: str, mapping: Any) -> Callable[[State], list]:
    """
    Merge the expanded ``mapping`` into every item of the list at ``path``.

    Items that are not dicts are left out of the result.
    """

    def merged(state: State) -> list:
        items = resolve_path(state, path) or []
        extra = expand_references(mapping, state)
        return [{**item, **extra} for item in items if isinstance(item, dict)]

    return merged


def each(path: Any, operation: Operation) -> Operation:
    """
    Run ``operation`` once per item of the list at ``path``.

    Each run sees ``data`` set to the current item. Items run sequentially
    and the first failure stops the loop. The original ``data`` is restored
    on the returned state; ``response`` is whatever the last run left.
    """

    async def run(state: State) -> State:
        items = resolve_path(state, path) if isinstance(path, str) else expand_references(path, state)
        if items is None:
            items = []
        if not isinstance(items, Iterable) or isinstance(items, (str, bytes, dict)):
            raise TypeError(f"each() expected a list at {path!r}, got {type(items).__name__}")
        items = list(items)
        logger.info(f"[EACH] Running operation over {len(items)} items")
        current = state
        for item in items:
            current = await run_operation(operation, current.evolve(data=item))
        return current.evolve(data=state.data)

    run.__qualname__ = "each"
    return run


def combine(*operations: Operation) -> Operation:
    """Group operations into one, run as a nested pipeline."""
    nested = execute_operations(*operations)

    async def run(state: State) -> State:
        return await nested(state)

    run.__qualname__ = f"combine[{len(operations)}]"
    return run


def array_to_string(items: Iterable[Any], separator: str) -> str:
    return separator.join(str(item) for item in items)


__all__ = [
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
]
