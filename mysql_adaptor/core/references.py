import re
from typing import Any, Optional

from jinja2 import Environment, StrictUndefined, Undefined
from jinja2.exceptions import TemplateError

from mysql_adaptor.core.errors import ResolutionError
from mysql_adaptor.core.logger import setup_logger
from mysql_adaptor.core.state import State

logger = setup_logger(__name__)

_SINGLE_EXPRESSION = re.compile(r"^\s*\{\{(?P<expr>.*?)\}\}\s*$", re.DOTALL)
_PATH_TOKEN = re.compile(r"[^.\[\]]+|\[(\d+|'[^']*'|\"[^\"]*\")\]")

_env: Optional[Environment] = None


def get_jinja_env() -> Environment:
    global _env
    if _env is None:
        _env = Environment(undefined=StrictUndefined, autoescape=False)
    return _env


def is_template(value: str) -> bool:
    return ('{{' in value and '}}' in value) or ('{%' in value and '%}' in value)


def render_context(state: State) -> dict[str, Any]:
    context = state.to_context()
    context["state"] = state
    return context


def render_template(template: str, state: State) -> Any:
    """
    Render a Jinja2 template string against the state.

    A template that is exactly one ``{{ expression }}`` evaluates to the
    expression's native value, so ``"{{ data.id }}"`` yields an int when
    ``data.id`` is an int. Anything else renders to a string.
    """
    env = get_jinja_env()
    context = render_context(state)
    match = _SINGLE_EXPRESSION.match(template)
    try:
        if match and "{{" not in match.group("expr"):
            expression = env.compile_expression(match.group("expr").strip(), undefined_to_none=False)
            value = expression(**context)
            if isinstance(value, Undefined):
                # StrictUndefined only raises when used, so force it here
                str(value)
            return value
        return env.from_string(template).render(**context)
    except TemplateError as e:
        logger.error(f"Failed to resolve reference {template!r}: {e}")
        raise ResolutionError(f"Could not resolve {template!r}: {e}") from e
    except Exception as e:
        logger.error(f"Failed to evaluate reference {template!r}: {type(e).__name__}: {e}")
        raise ResolutionError(f"Could not evaluate {template!r}: {e}") from e


def expand_references(value: Any, state: State) -> Any:
    """
    Resolve a field spec against the state.

    Callables are called with the state (and their result is expanded
    again), containers are expanded element-wise, template strings are
    rendered, anything else is returned unchanged.
    """
    if callable(value):
        return expand_references(value(state), state)
    if isinstance(value, dict):
        return {k: expand_references(v, state) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_references(item, state) for item in value]
    if isinstance(value, tuple):
        return tuple(expand_references(item, state) for item in value)
    if isinstance(value, str) and is_template(value):
        return render_template(value, state)
    return value


def split_path(path: str) -> list[Any]:
    """Split ``$.data.items[0].name`` into ``['data', 'items', 0, 'name']``."""
    trimmed = path.strip()
    if trimmed.startswith("$"):
        trimmed = trimmed[1:]
    parts: list[Any] = []
    for match in _PATH_TOKEN.finditer(trimmed):
        index = match.group(1)
        if index is None:
            parts.append(match.group(0))
        elif index.isdigit():
            parts.append(int(index))
        else:
            parts.append(index[1:-1])
    return parts


def resolve_path(source: Any, path: str) -> Any:
    """Walk a JSONPath-like path through dicts, lists and objects; None when missing."""
    value = source.to_context() if isinstance(source, State) else source
    for part in split_path(path):
        if value is None:
            return None
        if isinstance(part, int):
            if isinstance(value, (list, tuple)) and -len(value) <= part < len(value):
                value = value[part]
            else:
                return None
        elif isinstance(value, dict):
            value = value.get(part)
        elif isinstance(value, State):
            value = value.to_context().get(part)
        else:
            value = getattr(value, part, None)
    return value
