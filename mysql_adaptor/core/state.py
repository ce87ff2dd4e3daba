from typing import Any, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field

from mysql_adaptor.core.errors import OperationError


class State(BaseModel):
    """
    Record threaded through a pipeline run.

    Operations never mutate the state they receive; they return
    ``state.evolve(...)``, a shallow copy with some fields replaced.
    Unknown keys supplied by the caller are kept as extra fields.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, extra="allow")

    configuration: dict[str, Any] = Field(
        default_factory=dict,
        description="Connection parameters supplied by the caller"
    )
    connection: Optional[Any] = Field(
        default=None,
        description="Managed connection, set between connect and cleanup"
    )
    references: list[Any] = Field(
        default_factory=list,
        description="Prior results, oldest first"
    )
    data: Any = Field(default=None, description="Last computed payload")
    response: Optional[dict[str, Any]] = Field(
        default=None,
        description="Output of the most recent query, as {'body': ...}"
    )

    def evolve(self, **changes: Any) -> "State":
        return self.model_copy(update=changes)

    def to_context(self) -> dict[str, Any]:
        """Shallow mapping of every field, extras included, for template rendering."""
        context = {name: getattr(self, name) for name in type(self).model_fields}
        context.update(self.model_extra or {})
        return context

    @classmethod
    def coerce(cls, value: Any) -> "State":
        if isinstance(value, State):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise OperationError(
            f"Expected a State or mapping, got {type(value).__name__}"
        )
