"""
Pydantic models for MySQL connection configuration validation.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator

from mysql_adaptor.core.errors import MySQLConnectionError


class ConnectionConfig(BaseModel):
    """
    Connection parameters taken from ``state.configuration``.

    Every field is optional and no default is injected: only the keys the
    caller supplied reach the driver, so a missing host or user surfaces
    as a driver connection error rather than a silent fallback.
    """

    host: Optional[str] = Field(default=None, description="Server host name or address")
    port: Optional[int] = Field(default=None, ge=1, le=65535, description="Server TCP port")
    database: Optional[str] = Field(default=None, description="Default schema for the session")
    user: Optional[str] = Field(default=None, description="Login user")
    password: Optional[str] = Field(default=None, description="Login password")
    charset: Optional[str] = Field(default=None, description="Connection character set")

    @field_validator('host', 'database', 'user')
    @classmethod
    def strip_names(cls, v):
        return v.strip() if isinstance(v, str) else v

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }

    def driver_kwargs(self) -> dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


def validate_connection_config(configuration: Optional[dict]) -> ConnectionConfig:
    """
    Validate ``state.configuration``.

    Raises:
        MySQLConnectionError: If the configuration is not a mapping or has
            invalid or unknown fields.
    """
    if configuration is None:
        configuration = {}
    if not isinstance(configuration, dict):
        raise MySQLConnectionError(
            f"configuration must be a mapping, got {type(configuration).__name__}"
        )
    try:
        return ConnectionConfig(**configuration)
    except ValidationError as e:
        raise MySQLConnectionError(f"Invalid connection configuration: {e}") from e
