import os
import sys
import logging
from functools import lru_cache
from pydantic import BaseModel, ConfigDict, Field, field_validator


_ENV_LOADED = False


def _load_env_file(path: str, allow_override: bool = False) -> None:
    """
    Minimal .env loader: loads KEY=VALUE pairs into os.environ.
    - Ignores empty lines and lines starting with '#'
    - Supports values wrapped in single or double quotes
    - By default, does not override existing environment variables
    """
    if not path or not os.path.exists(path):
        return
    try:
        with open(path, "r", encoding="utf-8") as f:
            for raw_line in f:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):].strip()
                if "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()
                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]
                if allow_override or key not in os.environ:
                    os.environ[key] = value
    except PermissionError as e:
        print(f"FATAL: Permission denied reading environment file {path}: {e}", file=sys.stderr)
        raise


def load_env_if_present(force_reload: bool = False) -> None:
    """
    Load environment variables from MYSQL_ADAPTOR_ENV_FILE when set,
    otherwise from .env.local then .env in the working directory.
    """
    global _ENV_LOADED
    if _ENV_LOADED and not force_reload:
        return

    custom = os.environ.get("MYSQL_ADAPTOR_ENV_FILE")
    if custom:
        _load_env_file(custom)
    else:
        for env_file in ('.env.local', '.env'):
            _load_env_file(env_file)

    _ENV_LOADED = True


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """
    Adaptor settings read from the environment.

    Only ambient behaviour lives here. Connection parameters always come
    from the pipeline state's `configuration`.
    """
    model_config = ConfigDict(validate_assignment=True)

    log_level: str = Field(default="INFO", description="Logging level name")
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_location: bool = Field(default=False, description="Include file:line in text logs")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).strip().upper()
        if level == "SUCCESS":
            return level
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        load_env_if_present()
        return cls(
            log_level=os.getenv("MYSQL_ADAPTOR_LOG_LEVEL", "INFO"),
            log_json=_env_bool("MYSQL_ADAPTOR_LOG_JSON", False),
            log_location=_env_bool("MYSQL_ADAPTOR_LOG_LOCATION", False),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _ENV_LOADED
    _ENV_LOADED = False
    get_settings.cache_clear()
